class WalletBootError(Exception):
    """Base class for bootstrap errors."""


class MisconfiguredCredential(WalletBootError):
    """Raised when a connector or session needs a credential that is empty."""

    def __init__(self, message: str, connector_id: str = ""):
        super().__init__(message)
        self.connector_id = connector_id


class ConnectionInitializationFailure(WalletBootError):
    """Raised when the signaling client, wallet core or wallet handle cannot be built."""

    def __init__(self, message: str, step: str = ""):
        super().__init__(message)
        self.step = step


class InvalidTransition(WalletBootError):
    """Raised when an invalid session state transition is attempted."""


class TransportError(WalletBootError):
    """Raised when a JSON-RPC call fails at the HTTP or protocol level."""

    def __init__(self, message: str, url: str = "", code=None):
        super().__init__(message)
        self.url = url
        self.code = code


class ConfigError(WalletBootError):
    """Raised when settings contain values that cannot be used."""
