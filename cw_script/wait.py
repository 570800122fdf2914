"""
Post-transaction settling delay, per network class.

After a tx is accepted, the next step of a deployment script may read state
that is a few blocks behind. Sleeping a network-dependent amount is a coarse
stand-in for tracking confirmation depth.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from .config import Network, Settings, get_settings
from .logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class NetworkWaitPolicy:
    local_s: float = 6.0
    testnet_s: float = 30.0
    mainnet_s: float = 60.0

    def __post_init__(self) -> None:
        for name in ("local_s", "testnet_s", "mainnet_s"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0")

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "NetworkWaitPolicy":
        settings = settings or get_settings()
        return cls(
            local_s=settings.wait_local_s,
            testnet_s=settings.wait_testnet_s,
            mainnet_s=settings.wait_mainnet_s,
        )

    @classmethod
    def none(cls) -> "NetworkWaitPolicy":
        return cls(0.0, 0.0, 0.0)

    def delay_for(self, network: Network) -> float:
        return {
            Network.LOCAL: self.local_s,
            Network.TESTNET: self.testnet_s,
            Network.MAINNET: self.mainnet_s,
        }[Network.parse(network)]

    async def settle(
        self,
        network: Network,
        *,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> float:
        delay = self.delay_for(network)
        if delay > 0:
            log.debug("settling", network=Network.parse(network).value, seconds=delay)
            await sleep(delay)
        return delay


__all__ = ["NetworkWaitPolicy"]
