"""
Chain ids, RPC endpoints and the fallback URL.

The endpoint table is a frozen value built once at boot and handed to the
transport factory. Lookups never fail: any chain id missing from the table,
or mapped to an unusable URL, resolves to the fallback.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional
from urllib.parse import urlparse

from loguru import logger

ChainId = int


@dataclass(frozen=True)
class ChainInfo:
    id: ChainId
    name: str
    native_symbol: str
    native_decimals: int = 18


ETHEREUM = ChainInfo(id=1, name="Ethereum Mainnet", native_symbol="ETH")
OPTIMISM = ChainInfo(id=10, name="Optimism", native_symbol="ETH")
BSC = ChainInfo(id=56, name="BNB Smart Chain", native_symbol="BNB")
GNOSIS = ChainInfo(id=100, name="Gnosis Chain", native_symbol="xDAI")
POLYGON = ChainInfo(id=137, name="Polygon", native_symbol="MATIC")
NEXILIX = ChainInfo(id=240, name="Nexilix", native_symbol="NEXILIX")
ZKSYNC_ERA = ChainInfo(id=324, name="zkSync Era", native_symbol="ETH")
BASE = ChainInfo(id=8453, name="Base", native_symbol="ETH")
ARBITRUM = ChainInfo(id=42161, name="Arbitrum One", native_symbol="ETH")
ETHEREUM_CLASSIC = ChainInfo(id=61, name="Ethereum Classic", native_symbol="ETC")


CHAIN_MAP: Dict[ChainId, ChainInfo] = {
    c.id: c
    for c in [
        ETHEREUM,
        OPTIMISM,
        BSC,
        GNOSIS,
        POLYGON,
        NEXILIX,
        ZKSYNC_ERA,
        BASE,
        ARBITRUM,
        ETHEREUM_CLASSIC,
    ]
}


FALLBACK_URL = "https://eth-mainnet.g.alchemy.com/v2/iUoZdhhu265uyKgw-V6FojhyO80OKfmV"

DEFAULT_ENDPOINTS: Mapping[ChainId, str] = MappingProxyType(
    {
        1: "https://cloudflare-eth.com",
        137: "https://polygon-rpc.com",
        10: "https://mainnet.optimism.io",
        42161: "https://arb1.arbitrum.io/rpc",
        56: "https://rpc.ankr.com/bsc",
        100: "https://rpc.gnosischain.com",
        240: "https://rpcurl.pos.nexilix.com",
        324: "https://mainnet.era.zksync.io",
        61: "https://etc.rivet.link",
        8453: "https://mainnet.base.org",
    }
)


def is_usable_url(url: Optional[str]) -> bool:
    """True when url is a non-empty http(s) URL with a host."""
    if not url or not isinstance(url, str):
        return False
    parsed = urlparse(url.strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def _freeze(endpoints: Mapping[ChainId, str]) -> Mapping[ChainId, str]:
    return MappingProxyType({int(k): v for k, v in endpoints.items()})


@dataclass(frozen=True)
class EndpointTable:
    """Immutable chain id -> RPC URL mapping with a universal fallback."""

    endpoints: Mapping[ChainId, str] = field(default_factory=lambda: DEFAULT_ENDPOINTS)
    fallback_url: str = FALLBACK_URL

    def __post_init__(self):
        if not is_usable_url(self.fallback_url):
            raise ValueError(f"fallback_url is not a usable URL: {self.fallback_url!r}")
        object.__setattr__(self, "endpoints", _freeze(self.endpoints))

    def resolve(self, chain_id: ChainId) -> str:
        url = self.endpoints.get(chain_id)
        if url is None:
            return self.fallback_url
        if not is_usable_url(url):
            logger.warning(f"Unusable RPC URL for chain {chain_id} ({url!r}); using fallback")
            return self.fallback_url
        return url

    def chain_ids(self) -> List[ChainId]:
        return list(self.endpoints.keys())

    def with_overrides(
        self,
        overrides: Mapping[ChainId, str],
        fallback_url: Optional[str] = None,
    ) -> "EndpointTable":
        merged = dict(self.endpoints)
        merged.update({int(k): v for k, v in overrides.items()})
        return EndpointTable(endpoints=merged, fallback_url=fallback_url or self.fallback_url)

    def __contains__(self, chain_id: object) -> bool:
        return chain_id in self.endpoints

    def __len__(self) -> int:
        return len(self.endpoints)

    def __iter__(self) -> Iterator[ChainId]:
        return iter(self.endpoints)

    def __hash__(self) -> int:
        return hash((tuple(sorted(self.endpoints.items())), self.fallback_url))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EndpointTable):
            return NotImplemented
        return dict(self.endpoints) == dict(other.endpoints) and self.fallback_url == other.fallback_url


DEFAULT_TABLE = EndpointTable()


def get_chain(chain_id: ChainId) -> Optional[ChainInfo]:
    return CHAIN_MAP.get(chain_id)


__all__ = [
    "ChainId",
    "ChainInfo",
    "CHAIN_MAP",
    "FALLBACK_URL",
    "DEFAULT_ENDPOINTS",
    "DEFAULT_TABLE",
    "EndpointTable",
    "get_chain",
    "is_usable_url",
]
