from .bootstrap import WalletBootstrap
from .connector_registry import ConnectorRegistry
from .mount_gate import MountGate
from .render_gate import RenderGate
from .session_initializer import SessionInitializer
from .transport import TransportClient, TransportFactory

__all__ = [
    "WalletBootstrap",
    "ConnectorRegistry",
    "MountGate",
    "RenderGate",
    "SessionInitializer",
    "TransportClient",
    "TransportFactory",
]
