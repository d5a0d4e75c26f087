"""
Wallet connector descriptors and the built-in wallet factories.

A wallet factory is any callable taking WalletOptions and returning a
ConnectorDescriptor. Groups of factories are ordered, and so are the
factories inside each group.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence, Tuple


@dataclass(frozen=True)
class WalletOptions:
    credential: str
    app_name: str = ""
    group: str = ""


@dataclass(frozen=True)
class ConnectorDescriptor:
    id: str
    group: str
    name: str
    requires_credential: bool = True


WalletFactory = Callable[[WalletOptions], ConnectorDescriptor]


@dataclass(frozen=True)
class WalletGroup:
    """Input to the registry: a named, ordered list of wallet factories."""

    name: str
    wallets: Tuple[WalletFactory, ...]


@dataclass(frozen=True)
class ConnectorGroup:
    """Output of the registry: a named, ordered list of descriptors."""

    name: str
    connectors: Tuple[ConnectorDescriptor, ...]

    @property
    def ids(self) -> Tuple[str, ...]:
        return tuple(c.id for c in self.connectors)


def wallet_factory(wallet_id: str, name: str, requires_credential: bool = True) -> WalletFactory:
    """Build a factory producing a descriptor for a fixed wallet id."""

    def _factory(options: WalletOptions) -> ConnectorDescriptor:
        return ConnectorDescriptor(
            id=wallet_id,
            group=options.group,
            name=name,
            requires_credential=requires_credential,
        )

    _factory.__name__ = f"{wallet_id}_wallet"
    return _factory


# Coinbase Wallet ships its own SDK and does not need a relay project id.
coinbase_wallet = wallet_factory("coinbase", "Coinbase Wallet", requires_credential=False)
trust_wallet = wallet_factory("trust", "Trust Wallet")
rainbow_wallet = wallet_factory("rainbow", "Rainbow")
metamask_wallet = wallet_factory("metaMask", "MetaMask")
walletconnect_wallet = wallet_factory("walletConnect", "WalletConnect")
binance_wallet = wallet_factory("binance", "Binance Wallet")
bybit_wallet = wallet_factory("bybit", "Bybit Wallet")
okx_wallet = wallet_factory("okx", "OKX Wallet")
uniswap_wallet = wallet_factory("uniswap", "Uniswap Wallet")


RECOMMENDED = WalletGroup(
    name="Recommended",
    wallets=(coinbase_wallet, trust_wallet, rainbow_wallet, metamask_wallet, walletconnect_wallet),
)
OTHERS = WalletGroup(
    name="Others",
    wallets=(binance_wallet, bybit_wallet, okx_wallet, uniswap_wallet),
)

DEFAULT_WALLET_GROUPS: Tuple[WalletGroup, ...] = (RECOMMENDED, OTHERS)


def flatten(groups: Sequence[ConnectorGroup]) -> Tuple[ConnectorDescriptor, ...]:
    """Descriptors across all groups, in emission order."""
    return tuple(c for g in groups for c in g.connectors)


__all__ = [
    "WalletOptions",
    "ConnectorDescriptor",
    "WalletFactory",
    "WalletGroup",
    "ConnectorGroup",
    "wallet_factory",
    "coinbase_wallet",
    "trust_wallet",
    "rainbow_wallet",
    "metamask_wallet",
    "walletconnect_wallet",
    "binance_wallet",
    "bybit_wallet",
    "okx_wallet",
    "uniswap_wallet",
    "RECOMMENDED",
    "OTHERS",
    "DEFAULT_WALLET_GROUPS",
    "flatten",
]
