from .wallet_sdk import MockWalletSDKAdapter

__all__ = ["MockWalletSDKAdapter"]
