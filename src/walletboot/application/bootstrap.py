"""Composition root: wires configuration, transports, connectors and the session gate."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional, Sequence

from loguru import logger

from ..domain.chains import ChainId
from ..domain.connectors import DEFAULT_WALLET_GROUPS, ConnectorGroup, WalletGroup
from ..domain.session import SessionState
from ..infrastructure.config import AppConfig
from ..ports.wallet_sdk import WalletSDKPort
from .connector_registry import ConnectorRegistry
from .mount_gate import MountGate
from .render_gate import RenderGate
from .session_initializer import SessionInitializer
from .transport import TransportClient, TransportFactory


class WalletBootstrap:
    def __init__(
        self,
        config: AppConfig,
        sdk: WalletSDKPort,
        wallet_groups: Sequence[WalletGroup] = DEFAULT_WALLET_GROUPS,
    ):
        self.config = config
        self.transports = TransportFactory(config.endpoints, timeout_seconds=config.transport_timeout_seconds)
        self.connectors: List[ConnectorGroup] = ConnectorRegistry(app_name=config.app_name).build(
            wallet_groups, config.credential
        )
        self.mount_gate = MountGate()
        self.session = SessionInitializer(
            sdk,
            config.credential,
            metadata=config.metadata,
            step_timeout_seconds=config.step_timeout_seconds,
        )
        self.render_gate = RenderGate(self.mount_gate, self.session)
        self.mount_gate.on_ready(self.session.on_mount_ready)

    @classmethod
    def from_config(cls, config: AppConfig, sdk: WalletSDKPort, **kwargs) -> "WalletBootstrap":
        return cls(config, sdk, **kwargs)

    def transport(self, chain_id: ChainId) -> TransportClient:
        return self.transports.build(chain_id)

    def all_transports(self) -> Dict[ChainId, TransportClient]:
        return self.transports.build_all()

    def mount(self) -> bool:
        """Signal hydration complete.

        Raises RuntimeError outside a running event loop, before the gate is
        consumed, so the session can still start from a later mount().
        """
        asyncio.get_running_loop()
        return self.mount_gate.mark_ready()

    async def wait_ready(self) -> SessionState:
        """Wait for mount, then for the session attempt to settle."""
        await self.mount_gate.wait()
        state = await self.session.initialize()
        if not self.session.is_ready:
            logger.error(f"Wallet session not ready | status={state.status.value} | error={state.error}")
        return state

    def render(self, content: Callable[[], Any], placeholder: Optional[Any] = None) -> Any:
        return self.render_gate.render(content, placeholder)
