from .chains import (
    CHAIN_MAP,
    DEFAULT_ENDPOINTS,
    DEFAULT_TABLE,
    FALLBACK_URL,
    ChainId,
    ChainInfo,
    EndpointTable,
    get_chain,
)
from .connectors import (
    DEFAULT_WALLET_GROUPS,
    ConnectorDescriptor,
    ConnectorGroup,
    WalletFactory,
    WalletGroup,
    WalletOptions,
)
from .errors import (
    ConfigError,
    ConnectionInitializationFailure,
    InvalidTransition,
    MisconfiguredCredential,
    TransportError,
    WalletBootError,
)
from .session import AppMetadata, SessionState, SessionStatus

__all__ = [
    "CHAIN_MAP",
    "DEFAULT_ENDPOINTS",
    "DEFAULT_TABLE",
    "FALLBACK_URL",
    "ChainId",
    "ChainInfo",
    "EndpointTable",
    "get_chain",
    "DEFAULT_WALLET_GROUPS",
    "ConnectorDescriptor",
    "ConnectorGroup",
    "WalletFactory",
    "WalletGroup",
    "WalletOptions",
    "ConfigError",
    "ConnectionInitializationFailure",
    "InvalidTransition",
    "MisconfiguredCredential",
    "TransportError",
    "WalletBootError",
    "AppMetadata",
    "SessionState",
    "SessionStatus",
]
