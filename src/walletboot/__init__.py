"""walletboot - RPC endpoint resolution, wallet connectors and one-shot wallet session bootstrap."""

__version__ = "0.1.0"
