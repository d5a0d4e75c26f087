from typing import Any, Callable, Optional

from .mount_gate import MountGate
from .session_initializer import SessionInitializer


class RenderGate:
    """Decides between application content and a neutral placeholder."""

    def __init__(self, mount_gate: MountGate, initializer: SessionInitializer):
        self.mount_gate = mount_gate
        self.initializer = initializer

    @property
    def open(self) -> bool:
        return self.mount_gate.ready and self.initializer.is_ready

    def render(self, content: Callable[[], Any], placeholder: Optional[Any] = None) -> Any:
        # content is only invoked once both gates are open
        if not self.open:
            return placeholder
        return content()
