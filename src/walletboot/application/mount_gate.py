import asyncio
from typing import Callable, List, Optional

from loguru import logger


class MountGate:
    """One-shot signal that the client environment has finished hydrating."""

    def __init__(self):
        self._ready = False
        self._listeners: List[Callable[[], None]] = []
        self._event: Optional[asyncio.Event] = None

    @property
    def ready(self) -> bool:
        return self._ready

    def on_ready(self, callback: Callable[[], None]) -> None:
        """Register a listener. Fires immediately when already ready."""
        if self._ready:
            self._notify(callback)
            return
        self._listeners.append(callback)

    def mark_ready(self) -> bool:
        """Flip to ready. Returns False when the gate had already fired."""
        if self._ready:
            logger.debug("Mount gate already ready, ignoring signal")
            return False

        self._ready = True
        if self._event is not None:
            self._event.set()
        logger.info("Mount gate ready")

        listeners, self._listeners = self._listeners, []
        for callback in listeners:
            self._notify(callback)
        return True

    @staticmethod
    def _notify(callback: Callable[[], None]) -> None:
        # one failing listener must not starve the others
        try:
            callback()
        except Exception as exc:
            logger.exception(f"Mount listener failed | listener={getattr(callback, '__name__', '?')} | {exc}")

    async def wait(self) -> None:
        if self._ready:
            return
        if self._event is None:
            self._event = asyncio.Event()
        await self._event.wait()
