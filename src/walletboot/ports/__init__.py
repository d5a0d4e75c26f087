from .wallet_sdk import WalletSDKPort

__all__ = [
    "WalletSDKPort",
]
