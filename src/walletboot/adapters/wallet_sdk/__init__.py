from .mock_sdk import MockCore, MockSigningClient, MockWallet, MockWalletSDKAdapter

__all__ = [
    "MockCore",
    "MockSigningClient",
    "MockWallet",
    "MockWalletSDKAdapter",
]
