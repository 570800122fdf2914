"""
Configuration for cw-script: networks, contract groups and environment settings.

- `Network` / `NetworkConfig` describe which chain a group of contracts lives on.
- `GroupConfig` names a collection of contracts sharing a signer and multisig
  policy, and points at the JSON state file that records their addresses.
- `Settings` reads environment variables (optionally from `.env`) via
  pydantic-settings. `get_settings()` returns a cached instance.

Environment variables:
    CW_SCRIPT_NETWORK            (local|testnet|mainnet, default "local")
    CW_SCRIPT_LCD_URL            (str, default "http://127.0.0.1:1317")
    CW_SCRIPT_CHAIN_ID           (str, default "localterra")
    CW_SCRIPT_STATE_FILE         (path, default "./state.json")
    CW_SCRIPT_WASM_DIR / WASM_DIR (path)   compiled artifacts for `upload`
    CW_SCRIPT_REQUEST_TIMEOUT_S  (float, default 15)
    CW_SCRIPT_POLL_ATTEMPTS      (int, default 15)
    CW_SCRIPT_POLL_INTERVAL_S    (float, default 2)
    CW_SCRIPT_WAIT_LOCAL_S       (float, default 6)
    CW_SCRIPT_WAIT_TESTNET_S     (float, default 30)
    CW_SCRIPT_WAIT_MAINNET_S     (float, default 60)
    CW_SCRIPT_MULTISIGS          (json mapping) {"testnet": "terra1...", "mainnet/core": "terra1..."}
    CW_SCRIPT_SIGNER             ("module:factory") signer factory used by the CLI
    CW_SCRIPT_LOG_LEVEL          (str, default "INFO")
    CW_SCRIPT_LOG_FORMAT         ("console" | "json", default "console")

Multisig addresses can also come from the plain variables LOCAL_MULTISIG,
TESTNET_MULTISIG and MAINNET_MULTISIG.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError

DEFAULT_LCD_URL = "http://127.0.0.1:1317"
DEFAULT_CHAIN_ID = "localterra"
DEFAULT_STATE_FILE = "./state.json"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Network(str, Enum):
    LOCAL = "local"
    TESTNET = "testnet"
    MAINNET = "mainnet"

    @classmethod
    def parse(cls, value: "str | Network") -> "Network":
        if isinstance(value, Network):
            return value
        s = str(value).strip().lower()
        aliases = {
            "local": cls.LOCAL,
            "localterra": cls.LOCAL,
            "localnet": cls.LOCAL,
            "devnet": cls.LOCAL,
            "testnet": cls.TESTNET,
            "test": cls.TESTNET,
            "mainnet": cls.MAINNET,
            "main": cls.MAINNET,
        }
        try:
            return aliases[s]
        except KeyError:
            raise ConfigurationError(
                f"unknown network {value!r}", data={"allowed": sorted(aliases)}
            ) from None

    def multisig_name(self) -> str:
        """Name of the environment variable holding this network's multisig address."""
        return f"{self.name}_MULTISIG"


@dataclass(frozen=True)
class NetworkConfig:
    network: Network
    chain_id: str = DEFAULT_CHAIN_ID
    lcd_url: str = DEFAULT_LCD_URL

    @classmethod
    def from_settings(cls, settings: "Settings") -> "NetworkConfig":
        return cls(
            network=Network.parse(settings.network),
            chain_id=settings.chain_id,
            lcd_url=settings.lcd_url,
        )


@dataclass(frozen=True)
class GroupConfig:
    """
    A named set of contracts deployed together.

    `proposal=True` routes every execute through the group's cw3 multisig.
    Instances are immutable and shared by all contracts of the group.
    """

    name: str
    proposal: bool
    network_config: NetworkConfig
    file_path: Path

    @classmethod
    def from_settings(
        cls,
        name: str,
        *,
        proposal: bool = False,
        settings: Optional["Settings"] = None,
    ) -> "GroupConfig":
        settings = settings or get_settings()
        return cls(
            name=name,
            proposal=proposal,
            network_config=NetworkConfig.from_settings(settings),
            file_path=Path(settings.state_file),
        )

    @property
    def network(self) -> Network:
        return self.network_config.network


# --------------------------------- Settings ---------------------------------- #


class Settings(BaseSettings):
    # Chain
    network: str = Field("local", description="Network class: local, testnet or mainnet")
    lcd_url: str = Field(DEFAULT_LCD_URL, description="Cosmos LCD (REST) endpoint")
    chain_id: str = Field(DEFAULT_CHAIN_ID, description="Chain id the signer targets")
    request_timeout_s: float = Field(15.0, gt=0)

    # Files
    state_file: Path = Field(Path(DEFAULT_STATE_FILE), description="JSON state file")
    wasm_dir: Optional[Path] = Field(
        None,
        validation_alias=AliasChoices("CW_SCRIPT_WASM_DIR", "WASM_DIR"),
        description="Directory holding compiled <name>.wasm artifacts",
    )

    # Confirmation polling
    poll_attempts: int = Field(15, ge=1)
    poll_interval_s: float = Field(2.0, ge=0)

    # Post-operation settling delays per network class
    wait_local_s: float = Field(6.0, ge=0)
    wait_testnet_s: float = Field(30.0, ge=0)
    wait_mainnet_s: float = Field(60.0, ge=0)

    # "<network>" or "<network>/<group>" -> multisig address
    multisigs: Dict[str, str] = Field(default_factory=dict)

    # CLI signer factory, "package.module:callable"
    signer: Optional[str] = None

    log_level: str = "INFO"
    log_format: str = "console"

    model_config = SettingsConfigDict(
        env_prefix="CW_SCRIPT_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("network", mode="after")
    @classmethod
    def _check_network(cls, v: str) -> str:
        try:
            return Network.parse(v).value
        except ConfigurationError as e:
            raise ValueError(e.message) from e

    @field_validator("lcd_url", mode="after")
    @classmethod
    def _check_lcd_url(cls, v: str) -> str:
        if not v.lower().startswith(("http://", "https://")):
            raise ValueError(f"LCD URL must start with http:// or https://, got: {v!r}")
        return v.rstrip("/")

    @field_validator("log_level", mode="after")
    @classmethod
    def _check_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return v

    @field_validator("log_format", mode="after")
    @classmethod
    def _check_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("console", "json"):
            raise ValueError("log_format must be 'console' or 'json'")
        return v

    def multisig_address(self, network: Network, group: str) -> str:
        """
        Resolve the multisig (cw3) address that proposals of `group` go through.

        Lookup order: multisigs["<network>/<group>"], multisigs["<network>"],
        then the plain `<NETWORK>_MULTISIG` environment variable.
        """
        for key in (f"{network.value}/{group}", network.value):
            addr = self.multisigs.get(key)
            if addr:
                return addr
        addr = os.getenv(network.multisig_name())
        if addr:
            return addr
        raise ConfigurationError(
            f"no multisig address configured for network={network.value} group={group}",
            data={"env": network.multisig_name(), "group": group},
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings accessor (safe to call from anywhere)."""
    return Settings()


__all__ = [
    "Network",
    "NetworkConfig",
    "GroupConfig",
    "Settings",
    "get_settings",
    "DEFAULT_LCD_URL",
    "DEFAULT_CHAIN_ID",
    "DEFAULT_STATE_FILE",
]
