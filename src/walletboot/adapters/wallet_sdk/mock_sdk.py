import asyncio
import uuid
from dataclasses import dataclass, field
from typing import Any, List, Optional

from loguru import logger

from ...domain.session import AppMetadata
from ...ports.wallet_sdk import WalletSDKPort


@dataclass
class MockSigningClient:
    project_id: str
    client_id: str = field(default_factory=lambda: uuid.uuid4().hex)


@dataclass
class MockCore:
    project_id: str


@dataclass
class MockWallet:
    core: MockCore
    metadata: AppMetadata
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)


class MockWalletSDKAdapter(WalletSDKPort):
    """In-memory SDK for dry runs. Records every call in order.

    fail_step may be "signing_client", "core" or "wallet" to make that step raise.
    """

    def __init__(self, fail_step: Optional[str] = None, delay_seconds: float = 0.0):
        self.fail_step = fail_step
        self.delay_seconds = delay_seconds
        self.calls: List[str] = []

    async def _maybe_sleep(self) -> None:
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)

    async def init_signing_client(self, project_id: str) -> Any:
        self.calls.append("init_signing_client")
        await self._maybe_sleep()
        if self.fail_step == "signing_client":
            raise ConnectionError("mock relay rejected the project id")
        client = MockSigningClient(project_id=project_id)
        logger.debug(f"Mock signing client ready | client_id={client.client_id}")
        return client

    def create_core(self, project_id: str) -> Any:
        self.calls.append("create_core")
        if self.fail_step == "core":
            raise RuntimeError("mock core construction failed")
        return MockCore(project_id=project_id)

    async def init_wallet(self, core: Any, metadata: AppMetadata) -> Any:
        self.calls.append("init_wallet")
        await self._maybe_sleep()
        if self.fail_step == "wallet":
            raise RuntimeError("mock wallet init failed")
        return MockWallet(core=core, metadata=metadata)
