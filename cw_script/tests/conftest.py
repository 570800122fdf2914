from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pytest

from cw_script.chain import LcdClient, LcdConfig, Msg, Sender
from cw_script.config import GroupConfig, Network, NetworkConfig, Settings
from cw_script.wait import NetworkWaitPolicy

LCD_URL = "http://lcd.test"
SENDER_ADDR = "terra1sender"


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


class FakeSigner:
    """Records what it was asked to sign and returns deterministic bytes."""

    def __init__(self, address: str = SENDER_ADDR) -> None:
        self.address = address
        self.signed: List[Tuple[List[Msg], Optional[str]]] = []

    async def sign(self, messages: Sequence[Msg], *, memo: Optional[str] = None) -> bytes:
        self.signed.append((list(messages), memo))
        return f"signed-{len(self.signed)}".encode()


class RecordingWait(NetworkWaitPolicy):
    """Wait policy that records settle calls instead of sleeping."""

    def __init__(self) -> None:
        super().__init__(0.0, 0.0, 0.0)
        object.__setattr__(self, "calls", [])

    async def settle(self, network, *, sleep=asyncio.sleep) -> float:
        self.calls.append(Network.parse(network))
        return 0.0


def tx_response(
    txhash: str,
    *,
    code: int = 0,
    logs: Optional[List[Dict[str, Any]]] = None,
    events: Optional[List[Dict[str, Any]]] = None,
    raw_log: str = "",
    height: str = "0",
) -> Dict[str, Any]:
    return {
        "tx_response": {
            "txhash": txhash,
            "code": code,
            "codespace": "wasm" if code else "",
            "raw_log": raw_log,
            "height": height,
            "gas_wanted": "200000",
            "gas_used": "150000",
            "logs": logs or [],
            "events": events or [],
        }
    }


def event_log(event_type: str, **attrs: str) -> List[Dict[str, Any]]:
    return [
        {
            "msg_index": 0,
            "events": [
                {"type": event_type, "attributes": [{"key": k, "value": v} for k, v in attrs.items()]}
            ],
        }
    ]


@pytest.fixture
def state_file(tmp_path: Path) -> Path:
    return tmp_path / "state.json"


@pytest.fixture
def settings(tmp_path: Path, state_file: Path) -> Settings:
    return Settings(
        network="local",
        lcd_url=LCD_URL,
        chain_id="localterra",
        state_file=state_file,
        wasm_dir=tmp_path,
        poll_attempts=3,
        poll_interval_s=0.0,
        wait_local_s=0.0,
        multisigs={"local": "terra1multisig"},
        _env_file=None,
    )


@pytest.fixture
def group(state_file: Path) -> GroupConfig:
    return GroupConfig(
        name="core",
        proposal=False,
        network_config=NetworkConfig(network=Network.LOCAL, chain_id="localterra", lcd_url=LCD_URL),
        file_path=state_file,
    )


@pytest.fixture
def proposal_group(group: GroupConfig) -> GroupConfig:
    return GroupConfig(
        name=group.name,
        proposal=True,
        network_config=group.network_config,
        file_path=group.file_path,
    )


@pytest.fixture
def signer() -> FakeSigner:
    return FakeSigner()


@pytest.fixture
async def sender(signer: FakeSigner):
    async with LcdClient(LcdConfig(url=LCD_URL)) as lcd:
        yield Sender(lcd, signer)


@pytest.fixture
def wait_policy() -> RecordingWait:
    return RecordingWait()
