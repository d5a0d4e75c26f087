from __future__ import annotations

import asyncio
from typing import Any, List, Optional

import pytest

from walletboot.application.session_initializer import SessionInitializer
from walletboot.domain.errors import ConnectionInitializationFailure, InvalidTransition, MisconfiguredCredential
from walletboot.domain.session import AppMetadata, SessionStatus
from walletboot.ports.wallet_sdk import WalletSDKPort


class FakeSDK(WalletSDKPort):
    def __init__(
        self,
        fail_signing: bool = False,
        fail_wallet: bool = False,
        signing_gate: Optional[asyncio.Event] = None,
        wallet_handle: Any = "wallet-handle",
    ):
        self.fail_signing = fail_signing
        self.fail_wallet = fail_wallet
        self.signing_gate = signing_gate
        self.wallet_handle = wallet_handle
        self.calls: List[str] = []

    async def init_signing_client(self, project_id: str) -> Any:
        self.calls.append("init_signing_client")
        if self.signing_gate is not None:
            await self.signing_gate.wait()
        if self.fail_signing:
            raise ConnectionError("relay rejected project id")
        self.calls.append("signing_client_resolved")
        return f"sign-client:{project_id}"

    def create_core(self, project_id: str) -> Any:
        self.calls.append("create_core")
        return f"core:{project_id}"

    async def init_wallet(self, core: Any, metadata: AppMetadata) -> Any:
        self.calls.append("init_wallet")
        if self.fail_wallet:
            raise RuntimeError("wallet init exploded")
        return self.wallet_handle


@pytest.mark.anyio
async def test_end_to_end_ready_publishes_handle_once() -> None:
    sdk = FakeSDK()
    init = SessionInitializer(sdk, "project-id")
    published = []
    init.subscribe(published.append)

    assert init.is_ready is False
    task = init.on_mount_ready()
    assert init.status is SessionStatus.INITIALIZING
    await task

    assert init.status is SessionStatus.READY
    assert init.is_ready is True
    assert init.handle == "wallet-handle"
    assert init.signing_client == "sign-client:project-id"
    assert published == ["wallet-handle"]


@pytest.mark.anyio
async def test_second_mount_signal_is_noop() -> None:
    sdk = FakeSDK()
    init = SessionInitializer(sdk, "project-id")

    first = init.on_mount_ready()
    second = init.on_mount_ready()
    assert second is None
    await first
    assert init.on_mount_ready() is None

    assert sdk.calls.count("init_signing_client") == 1
    assert sdk.calls.count("init_wallet") == 1
    assert init.attempts == 1
    assert init.status is SessionStatus.READY


@pytest.mark.anyio
async def test_steps_run_strictly_in_sequence() -> None:
    gate = asyncio.Event()
    sdk = FakeSDK(signing_gate=gate)
    init = SessionInitializer(sdk, "project-id")

    task = init.on_mount_ready()
    for _ in range(5):
        await asyncio.sleep(0)
    assert sdk.calls == ["init_signing_client"]

    gate.set()
    await task
    assert sdk.calls == ["init_signing_client", "signing_client_resolved", "create_core", "init_wallet"]


@pytest.mark.anyio
async def test_signing_client_rejection_fails_closed() -> None:
    sdk = FakeSDK(fail_signing=True)
    init = SessionInitializer(sdk, "project-id")
    published = []
    init.subscribe(published.append)

    state = await init.initialize()

    assert state.status is SessionStatus.FAILED
    assert isinstance(state.error, ConnectionInitializationFailure)
    assert state.error.step == "signing_client"
    assert isinstance(state.error.__cause__, ConnectionError)
    assert "create_core" not in sdk.calls

    # later signals never revive the session
    assert init.on_mount_ready() is None
    await asyncio.sleep(0)
    assert init.is_ready is False
    assert published == []


@pytest.mark.anyio
async def test_wallet_step_failure_is_terminal() -> None:
    init = SessionInitializer(FakeSDK(fail_wallet=True), "project-id")
    state = await init.initialize()
    assert state.status is SessionStatus.FAILED
    assert state.error.step == "wallet"
    assert init.handle is None


@pytest.mark.anyio
async def test_empty_credential_aborts_before_any_sdk_call() -> None:
    sdk = FakeSDK()
    init = SessionInitializer(sdk, "  ")
    state = await init.initialize()

    assert state.status is SessionStatus.FAILED
    assert isinstance(state.error.__cause__, MisconfiguredCredential)
    assert sdk.calls == []


@pytest.mark.anyio
async def test_missing_handle_is_a_failure() -> None:
    init = SessionInitializer(FakeSDK(wallet_handle=None), "project-id")
    state = await init.initialize()
    assert state.status is SessionStatus.FAILED


@pytest.mark.anyio
async def test_retry_is_explicit_and_only_from_failed() -> None:
    sdk = FakeSDK(fail_signing=True)
    init = SessionInitializer(sdk, "project-id")

    with pytest.raises(InvalidTransition):
        init.retry()

    await init.initialize()
    assert init.status is SessionStatus.FAILED

    sdk.fail_signing = False
    await init.retry()
    assert init.status is SessionStatus.READY
    assert init.attempts == 2

    with pytest.raises(InvalidTransition):
        init.retry()


@pytest.mark.anyio
async def test_cancel_in_flight_fails_closed() -> None:
    gate = asyncio.Event()
    sdk = FakeSDK(signing_gate=gate)
    init = SessionInitializer(sdk, "project-id")

    task = init.on_mount_ready()
    await asyncio.sleep(0)
    assert init.cancel() is True

    state = await init.initialize()
    assert task.cancelled()
    assert state.status is SessionStatus.FAILED
    assert "cancelled" in str(state.error)
    assert "init_wallet" not in sdk.calls
    assert init.cancel() is False


@pytest.mark.anyio
async def test_step_timeout_fails_closed() -> None:
    sdk = FakeSDK(signing_gate=asyncio.Event())
    init = SessionInitializer(sdk, "project-id", step_timeout_seconds=0.05)

    state = await init.initialize()
    assert state.status is SessionStatus.FAILED
    assert "timed out" in str(state.error)
    assert state.error.step == "signing_client"


@pytest.mark.anyio
async def test_concurrent_initialize_calls_share_one_attempt() -> None:
    sdk = FakeSDK()
    init = SessionInitializer(sdk, "project-id")

    a, b = await asyncio.gather(init.initialize(), init.initialize())
    assert a == b
    assert a.status is SessionStatus.READY
    assert sdk.calls.count("init_signing_client") == 1


@pytest.mark.anyio
async def test_account_events_do_not_reinitialize() -> None:
    sdk = FakeSDK()
    init = SessionInitializer(sdk, "project-id")
    await init.initialize()

    init.on_account_event(connected=False)
    init.on_account_event(connected=True)
    assert init.status is SessionStatus.READY
    assert sdk.calls.count("init_signing_client") == 1


@pytest.mark.anyio
async def test_metadata_reaches_wallet_step() -> None:
    seen = {}

    class MetaSDK(FakeSDK):
        async def init_wallet(self, core: Any, metadata: AppMetadata) -> Any:
            seen["core"] = core
            seen["metadata"] = metadata
            return "handle"

    meta = AppMetadata(name="Drain", description="d", url="https://example.org", icons=())
    await SessionInitializer(MetaSDK(), "pid", metadata=meta).initialize()
    assert seen == {"core": "core:pid", "metadata": meta}


def test_mount_signal_requires_running_loop() -> None:
    init = SessionInitializer(FakeSDK(), "project-id")
    with pytest.raises(RuntimeError):
        init.on_mount_ready()


@pytest.mark.anyio
async def test_failing_subscriber_does_not_break_initialization() -> None:
    init = SessionInitializer(FakeSDK(), "project-id")
    published = []

    def broken(handle: Any) -> None:
        raise RuntimeError("subscriber blew up")

    init.subscribe(broken)
    init.subscribe(published.append)

    state = await init.initialize()
    assert state.status is SessionStatus.READY
    assert published == ["wallet-handle"]

    # late subscribers are contained too
    init.subscribe(broken)
    init.subscribe(published.append)
    assert published == ["wallet-handle", "wallet-handle"]
