"""
transport.py - Chain-bound JSON-RPC transport clients

A TransportClient is bound to one (chain id, URL) pair for its whole life.
Clients are values: two clients built for the same chain compare equal.

Usage:
    factory = TransportFactory(DEFAULT_TABLE)
    client = factory.build(1)
    block = await client.block_number()
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

import httpx
from loguru import logger

from ..domain.chains import ChainId, ChainInfo, EndpointTable, get_chain
from ..domain.errors import TransportError


@dataclass(frozen=True)
class TransportClient:
    chain_id: ChainId
    url: str
    timeout_seconds: float = 10.0
    session: Optional[httpx.AsyncClient] = field(default=None, compare=False, hash=False, repr=False)
    _request_ids: Iterator[int] = field(
        default_factory=lambda: itertools.count(1), init=False, compare=False, hash=False, repr=False
    )

    @property
    def chain(self) -> Optional[ChainInfo]:
        return get_chain(self.chain_id)

    def open(self) -> httpx.AsyncClient:
        """New httpx client pointed at this transport's URL. Caller closes it."""
        return httpx.AsyncClient(timeout=self.timeout_seconds)

    async def request(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """Issue one JSON-RPC 2.0 call and return its result member."""
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._request_ids),
            "method": method,
            "params": params or [],
        }

        if self.session is not None:
            return await self._post(self.session, payload)
        async with self.open() as client:
            return await self._post(client, payload)

    async def _post(self, client: httpx.AsyncClient, payload: Dict[str, Any]) -> Any:
        try:
            resp = await client.post(self.url, json=payload)
            resp.raise_for_status()
            body = resp.json()
        except httpx.HTTPError as exc:
            logger.warning(f"RPC transport error | chain={self.chain_id} | method={payload['method']} | {exc}")
            raise TransportError(str(exc), url=self.url) from exc
        except ValueError as exc:
            raise TransportError(f"invalid JSON-RPC response: {exc}", url=self.url) from exc

        if not isinstance(body, dict):
            raise TransportError("invalid JSON-RPC response: not an object", url=self.url)

        error = body.get("error")
        if error:
            code = error.get("code") if isinstance(error, dict) else None
            message = error.get("message", str(error)) if isinstance(error, dict) else str(error)
            raise TransportError(message, url=self.url, code=code)

        return body.get("result")

    async def chain_id_remote(self) -> int:
        """eth_chainId as reported by the node."""
        return int(await self.request("eth_chainId"), 16)

    async def block_number(self) -> int:
        return int(await self.request("eth_blockNumber"), 16)


class TransportFactory:
    """Builds chain-bound clients from an endpoint table. No caching."""

    def __init__(self, table: EndpointTable, timeout_seconds: float = 10.0):
        self.table = table
        self.timeout_seconds = timeout_seconds

    def resolve(self, chain_id: ChainId) -> str:
        return self.table.resolve(chain_id)

    def build(self, chain_id: ChainId, session: Optional[httpx.AsyncClient] = None) -> TransportClient:
        return TransportClient(
            chain_id=chain_id,
            url=self.table.resolve(chain_id),
            timeout_seconds=self.timeout_seconds,
            session=session,
        )

    def build_all(self) -> Dict[ChainId, TransportClient]:
        """One client per chain in the table."""
        return {cid: self.build(cid) for cid in self.table.chain_ids()}
