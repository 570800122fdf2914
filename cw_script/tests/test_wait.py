from __future__ import annotations

import pytest

from cw_script.config import Network, Settings
from cw_script.wait import NetworkWaitPolicy

pytestmark = pytest.mark.anyio


async def test_default_delays_per_network():
    policy = NetworkWaitPolicy()
    assert policy.delay_for(Network.LOCAL) == 6.0
    assert policy.delay_for(Network.TESTNET) == 30.0
    assert policy.delay_for("mainnet") == 60.0


async def test_settle_sleeps_the_configured_delay():
    slept = []

    async def fake_sleep(s: float) -> None:
        slept.append(s)

    policy = NetworkWaitPolicy(local_s=1.5, testnet_s=3.0, mainnet_s=9.0)
    assert await policy.settle(Network.TESTNET, sleep=fake_sleep) == 3.0
    assert slept == [3.0]


async def test_zero_delay_does_not_sleep():
    slept = []

    async def fake_sleep(s: float) -> None:
        slept.append(s)

    assert await NetworkWaitPolicy.none().settle(Network.MAINNET, sleep=fake_sleep) == 0.0
    assert slept == []


async def test_from_settings():
    s = Settings(wait_local_s=0, wait_testnet_s=12, wait_mainnet_s=24, _env_file=None)
    policy = NetworkWaitPolicy.from_settings(s)
    assert (policy.local_s, policy.testnet_s, policy.mainnet_s) == (0, 12, 24)


async def test_negative_delay_rejected():
    with pytest.raises(ValueError):
        NetworkWaitPolicy(local_s=-1)
