"""
session_initializer.py - One-shot wallet session bootstrap

FAIL CLOSED: if any step fails the session stays FAILED and the readiness
gate stays shut. No automatic retry, no backoff. The only way back is an
explicit retry() from FAILED.

Sequence (strictly ordered, never concurrent):
    1. signing client    <- sdk.init_signing_client(credential)
    2. wallet core       <- sdk.create_core(credential)
       wallet handle     <- sdk.init_wallet(core, metadata)

Transitions:
    IDLE         -> INITIALIZING          (mount ready, once)
    INITIALIZING -> READY | FAILED
    FAILED       -> INITIALIZING          (retry() only)
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set

from loguru import logger

from ..domain.errors import ConnectionInitializationFailure, InvalidTransition, MisconfiguredCredential
from ..domain.session import AppMetadata, SessionState, SessionStatus
from ..ports.wallet_sdk import WalletSDKPort

ReadyCallback = Callable[[Any], None]


class SessionInitializer:
    def __init__(
        self,
        sdk: WalletSDKPort,
        credential: str,
        metadata: Optional[AppMetadata] = None,
        step_timeout_seconds: Optional[float] = None,
    ):
        self.sdk = sdk
        self.credential = credential
        self.metadata = metadata or AppMetadata()
        self.step_timeout_seconds = step_timeout_seconds

        self._state = SessionState.idle()
        self._transitions: Dict[SessionStatus, Set[SessionStatus]] = {
            SessionStatus.IDLE: {SessionStatus.INITIALIZING},
            SessionStatus.INITIALIZING: {SessionStatus.READY, SessionStatus.FAILED},
            SessionStatus.FAILED: {SessionStatus.INITIALIZING},
        }
        self._task: Optional[asyncio.Task] = None
        self._attempt = 0
        self._step = ""
        self._signing_client: Any = None
        self._subscribers: List[ReadyCallback] = []

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def status(self) -> SessionStatus:
        return self._state.status

    @property
    def is_ready(self) -> bool:
        return self._state.status is SessionStatus.READY

    @property
    def handle(self) -> Any:
        return self._state.handle

    @property
    def signing_client(self) -> Any:
        return self._signing_client

    @property
    def attempts(self) -> int:
        return self._attempt

    def can_transition(self, to_status: SessionStatus) -> bool:
        return to_status in self._transitions.get(self._state.status, set())

    def _set_state(self, new_state: SessionState) -> None:
        if not self.can_transition(new_state.status):
            raise InvalidTransition(f"{self._state.status.value} -> {new_state.status.value}")
        logger.debug(f"Session {self._state.status.value} -> {new_state.status.value}")
        self._state = new_state

    def subscribe(self, callback: ReadyCallback) -> None:
        """Call back with the handle once READY. Fires immediately if already READY."""
        if self.is_ready:
            self._notify(callback, self._state.handle)
            return
        self._subscribers.append(callback)

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------
    def on_mount_ready(self) -> Optional[asyncio.Task]:
        """Start initialization once. Later signals are no-ops and return None.

        Must be called from inside a running event loop.
        """
        if self._state.status is not SessionStatus.IDLE:
            logger.debug(f"Mount signal ignored | status={self._state.status.value}")
            return None
        return self._start()

    async def initialize(self) -> SessionState:
        """Start (if IDLE) and wait for the in-flight attempt to finish."""
        self.on_mount_ready()
        task = self._task
        if task is not None and not task.done():
            try:
                await asyncio.shield(task)
            except asyncio.CancelledError:
                if not task.cancelled():
                    raise
        return self._state

    def retry(self) -> asyncio.Task:
        """Explicit re-initialization. Only allowed from FAILED."""
        if self._state.status is not SessionStatus.FAILED:
            raise InvalidTransition(f"retry not allowed from {self._state.status.value}")
        logger.info(f"Retrying wallet session initialization | previous_attempts={self._attempt}")
        return self._start()

    def cancel(self) -> bool:
        """Abort an in-flight attempt. The session fails closed."""
        task = self._task
        if task is None or task.done() or self._state.status is not SessionStatus.INITIALIZING:
            return False
        self._set_state(SessionState.failed(ConnectionInitializationFailure("initialization cancelled", step=self._step)))
        task.cancel()
        logger.warning(f"Wallet session initialization cancelled | step={self._step or '-'}")
        return True

    def on_account_event(self, connected: bool) -> None:
        # One session per process; account changes are observed, not acted on.
        if connected:
            logger.info("Account is connected, session left as is")
        else:
            logger.info("Account disconnected, session left as is")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _start(self) -> asyncio.Task:
        loop = asyncio.get_running_loop()
        self._set_state(SessionState.initializing())
        self._attempt += 1
        self._task = loop.create_task(self._run(self._attempt))
        return self._task

    async def _step_call(self, step: str, awaitable: Awaitable[Any]) -> Any:
        self._step = step
        if self.step_timeout_seconds is None:
            return await awaitable
        try:
            return await asyncio.wait_for(awaitable, timeout=self.step_timeout_seconds)
        except asyncio.TimeoutError as exc:
            raise ConnectionInitializationFailure(
                f"{step} timed out after {self.step_timeout_seconds}s", step=step
            ) from exc

    async def _setup(self) -> Any:
        if not (self.credential or "").strip():
            self._step = "credential"
            raise MisconfiguredCredential("wallet session requires a non-empty project credential")

        self._signing_client = await self._step_call(
            "signing_client", self.sdk.init_signing_client(self.credential)
        )

        self._step = "core"
        core = self.sdk.create_core(self.credential)

        return await self._step_call("wallet", self.sdk.init_wallet(core, self.metadata))

    async def _run(self, attempt: int) -> None:
        try:
            handle = await self._setup()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            if attempt != self._attempt or self._state.status is not SessionStatus.INITIALIZING:
                return
            if isinstance(exc, ConnectionInitializationFailure):
                failure = exc
            else:
                failure = ConnectionInitializationFailure(f"{type(exc).__name__}: {exc}", step=self._step)
                failure.__cause__ = exc
            logger.opt(exception=exc).error(f"Error initializing wallet session | step={self._step} | {exc}")
            self._set_state(SessionState.failed(failure))
            return

        if attempt != self._attempt or self._state.status is not SessionStatus.INITIALIZING:
            return
        if handle is None:
            failure = ConnectionInitializationFailure("wallet SDK returned no handle", step="wallet")
            logger.error("Error initializing wallet session | step=wallet | no handle returned")
            self._set_state(SessionState.failed(failure))
            return

        self._set_state(SessionState.ready(handle))
        logger.info("Wallet session initialized successfully")

        subscribers, self._subscribers = self._subscribers, []
        for callback in subscribers:
            self._notify(callback, handle)

    @staticmethod
    def _notify(callback: ReadyCallback, handle: Any) -> None:
        # subscriber errors never leak out of the session
        try:
            callback(handle)
        except Exception as exc:
            logger.exception(f"Session subscriber failed | subscriber={getattr(callback, '__name__', '?')} | {exc}")
