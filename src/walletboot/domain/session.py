from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple


class SessionStatus(Enum):
    IDLE = "IDLE"
    INITIALIZING = "INITIALIZING"
    READY = "READY"
    FAILED = "FAILED"


@dataclass(frozen=True)
class AppMetadata:
    """Static metadata the wallet handle advertises to peers."""

    name: str = "Test App"
    description: str = "AppKit Example"
    url: str = "https://web3modal.com"
    icons: Tuple[str, ...] = ("https://avatars.githubusercontent.com/u/37784886",)

    def as_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "url": self.url,
            "icons": list(self.icons),
        }


@dataclass(frozen=True)
class SessionState:
    status: SessionStatus = SessionStatus.IDLE
    handle: Optional[Any] = None
    error: Optional[BaseException] = field(default=None, compare=False)

    @classmethod
    def idle(cls) -> "SessionState":
        return cls(SessionStatus.IDLE)

    @classmethod
    def initializing(cls) -> "SessionState":
        return cls(SessionStatus.INITIALIZING)

    @classmethod
    def ready(cls, handle: Any) -> "SessionState":
        if handle is None:
            raise ValueError("ready state requires a wallet handle")
        return cls(SessionStatus.READY, handle=handle)

    @classmethod
    def failed(cls, error: BaseException) -> "SessionState":
        return cls(SessionStatus.FAILED, error=error)
