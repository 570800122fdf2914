"""
Async client for the Cosmos SDK LCD (REST) gateway.

Only the endpoints cw-script needs:
  * POST /cosmos/tx/v1beta1/txs                      broadcast (sync mode)
  * GET  /cosmos/tx/v1beta1/txs/{hash}               tx by hash
  * GET  /cosmwasm/wasm/v1/contract/{addr}/smart/{q} smart query

plus `wait_for_tx`, a bounded confirmation poll.

Notes
-----
* Transport failures are not retried here; they surface as
  ChainCommunicationError and the caller decides.
* While a tx sits in the mempool the node answers "not found" (HTTP 404, or a
  400/500 with code 5 depending on the SDK version); `get_tx` maps that to None.
"""

from __future__ import annotations

import asyncio
import base64
import json
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx

from ..errors import ChainCommunicationError, ConfirmationTimeout
from ..logging import get_logger
from ..msgs import canonical_json
from ..version import __version__
from .types import TxOutcome

log = get_logger(__name__)

BROADCAST_MODE_SYNC = "BROADCAST_MODE_SYNC"


def _build_headers(extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    hdrs = {
        "content-type": "application/json",
        "accept": "application/json",
        "user-agent": f"cw-script/{__version__}",
    }
    if extra:
        hdrs.update(extra)
    return hdrs


def _looks_not_found(status: int, body: Any) -> bool:
    if status == 404:
        return True
    if status in (400, 500) and isinstance(body, dict):
        if body.get("code") == 5:
            return True
        msg = str(body.get("message") or body.get("error") or "").lower()
        return "not found" in msg
    return False


@dataclass
class LcdConfig:
    url: str
    timeout_s: float = 15.0
    headers: Optional[Dict[str, str]] = None


class LcdClient:
    """
    Minimal async LCD client. One instance can be shared by every contract of
    a group; it holds no per-call state.
    """

    def __init__(
        self,
        config: LcdConfig,
        *,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._cfg = config
        self._client: Optional[httpx.AsyncClient] = None
        self._sleep = sleep

    @property
    def url(self) -> str:
        return self._cfg.url

    # ---------- lifecycle ----------

    async def start(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._cfg.url,
                timeout=self._cfg.timeout_s,
                headers=_build_headers(self._cfg.headers),
            )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "LcdClient":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ---------- core transport ----------

    async def _request(self, method: str, path: str, *, body: Any = None) -> tuple[int, Any]:
        if self._client is None:
            await self.start()
        assert self._client is not None  # for type-checkers

        try:
            resp = await self._client.request(method, path, json=body)
        except httpx.HTTPError as exc:
            raise ChainCommunicationError(
                f"{method} {path} failed: {exc}", data={"url": self._cfg.url}
            ) from exc

        try:
            data = resp.json()
        except (json.JSONDecodeError, ValueError) as exc:
            raise ChainCommunicationError(
                f"non-JSON response from LCD: HTTP {resp.status_code}: {resp.text[:256]}",
                status=resp.status_code,
            ) from exc
        return resp.status_code, data

    @staticmethod
    def _raise_for(method: str, path: str, status: int, data: Any) -> None:
        msg = data.get("message") if isinstance(data, dict) else None
        raise ChainCommunicationError(
            f"{method} {path} returned HTTP {status}: {msg or data!r}",
            status=status,
            data={"body": data},
        )

    # ---------- typed methods ----------

    async def broadcast_sync(self, tx_bytes: bytes) -> TxOutcome:
        """Submit signed tx bytes; returns once the node accepted (or rejected) it in CheckTx."""
        path = "/cosmos/tx/v1beta1/txs"
        status, data = await self._request(
            "POST",
            path,
            body={
                "tx_bytes": base64.b64encode(bytes(tx_bytes)).decode("ascii"),
                "mode": BROADCAST_MODE_SYNC,
            },
        )
        if status != 200 or not isinstance(data, dict) or not isinstance(data.get("tx_response"), dict):
            self._raise_for("POST", path, status, data)
        return TxOutcome.from_lcd(data["tx_response"])

    async def get_tx(self, txhash: str) -> Optional[TxOutcome]:
        """Return the confirmed tx, or None while the node does not know it yet."""
        path = f"/cosmos/tx/v1beta1/txs/{txhash}"
        status, data = await self._request("GET", path)
        if _looks_not_found(status, data):
            return None
        if status != 200 or not isinstance(data, dict) or not isinstance(data.get("tx_response"), dict):
            self._raise_for("GET", path, status, data)
        return TxOutcome.from_lcd(data["tx_response"])

    async def wait_for_tx(self, txhash: str, attempts: int = 15, interval_s: float = 2.0) -> TxOutcome:
        """
        Poll `get_tx` up to `attempts` times, `interval_s` apart.

        Raises ConfirmationTimeout when every attempt came back empty.
        """
        for attempt in range(1, int(attempts) + 1):
            outcome = await self.get_tx(txhash)
            if outcome is not None:
                log.debug("tx_confirmed", txhash=txhash, attempt=attempt, height=outcome.height)
                return outcome
            if attempt < attempts:
                await self._sleep(interval_s)
        raise ConfirmationTimeout(txhash, int(attempts), float(interval_s))

    async def query_contract_smart(self, contract_addr: str, query: Any) -> Any:
        """Run a read-only smart query and return the decoded `data` field."""
        # url-safe alphabet: a "/" in the segment would split the gateway route
        encoded = base64.urlsafe_b64encode(canonical_json(query).encode("utf-8")).decode("ascii")
        path = f"/cosmwasm/wasm/v1/contract/{contract_addr}/smart/{encoded}"
        status, data = await self._request("GET", path)
        if status != 200 or not isinstance(data, dict) or "data" not in data:
            self._raise_for("GET", path, status, data)
        return data["data"]


__all__ = ["LcdClient", "LcdConfig", "BROADCAST_MODE_SYNC"]
