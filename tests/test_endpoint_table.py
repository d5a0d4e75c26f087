from __future__ import annotations

import pytest

from walletboot.domain.chains import (
    CHAIN_MAP,
    DEFAULT_ENDPOINTS,
    DEFAULT_TABLE,
    FALLBACK_URL,
    EndpointTable,
    get_chain,
)


def test_resolve_known_chain() -> None:
    assert DEFAULT_TABLE.resolve(1) == "https://cloudflare-eth.com"


def test_resolve_unknown_chain_uses_fallback() -> None:
    assert DEFAULT_TABLE.resolve(999999) == FALLBACK_URL


def test_default_table_contents_are_exact() -> None:
    assert dict(DEFAULT_ENDPOINTS) == {
        1: "https://cloudflare-eth.com",
        10: "https://mainnet.optimism.io",
        56: "https://rpc.ankr.com/bsc",
        100: "https://rpc.gnosischain.com",
        137: "https://polygon-rpc.com",
        240: "https://rpcurl.pos.nexilix.com",
        324: "https://mainnet.era.zksync.io",
        8453: "https://mainnet.base.org",
        42161: "https://arb1.arbitrum.io/rpc",
        61: "https://etc.rivet.link",
    }
    assert FALLBACK_URL == "https://eth-mainnet.g.alchemy.com/v2/iUoZdhhu265uyKgw-V6FojhyO80OKfmV"


def test_every_table_chain_has_chain_info() -> None:
    assert set(CHAIN_MAP) == set(DEFAULT_ENDPOINTS)
    assert get_chain(1).native_symbol == "ETH"
    assert get_chain(424242) is None


@pytest.mark.parametrize("bad_url", ["", "not a url", "ftp://rpc.example.org", "https://"])
def test_unusable_entry_falls_back(bad_url: str) -> None:
    table = EndpointTable(endpoints={5: bad_url})
    assert table.resolve(5) == FALLBACK_URL


def test_table_is_immutable() -> None:
    table = EndpointTable(endpoints={1: "https://a.example.org"})
    with pytest.raises(TypeError):
        table.endpoints[2] = "https://b.example.org"  # type: ignore[index]


def test_with_overrides_returns_new_table() -> None:
    updated = DEFAULT_TABLE.with_overrides({137: "https://polygon.example.org", 5: "https://goerli.example.org"})
    assert updated.resolve(137) == "https://polygon.example.org"
    assert updated.resolve(5) == "https://goerli.example.org"
    assert DEFAULT_TABLE.resolve(137) == "https://polygon-rpc.com"
    assert 5 not in DEFAULT_TABLE


def test_fallback_must_be_usable() -> None:
    with pytest.raises(ValueError):
        EndpointTable(endpoints={}, fallback_url="")


def test_independent_tables_do_not_share_state() -> None:
    a = EndpointTable(endpoints={1: "https://a.example.org"}, fallback_url="https://fa.example.org")
    b = EndpointTable(endpoints={1: "https://b.example.org"}, fallback_url="https://fb.example.org")
    assert a.resolve(1) != b.resolve(1)
    assert a.resolve(7) == "https://fa.example.org"
    assert b.resolve(7) == "https://fb.example.org"
    assert a == EndpointTable(endpoints={1: "https://a.example.org"}, fallback_url="https://fa.example.org")
