from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import os
from pathlib import Path
import tomllib
from typing import cast
import warnings

from .constants import Defaults


@dataclass(frozen=True, slots=True)
class PohodaConfig:
    ico: str = Defaults.ICO
    application: str = Defaults.APPLICATION

    def __post_init__(self) -> None:
        if not self.application.strip():
            raise ValueError("application must not be empty")
        if any(char.isspace() for char in self.ico):
            raise ValueError(f"ico must not contain whitespace, got {self.ico!r}")

    @classmethod
    def from_env(cls) -> PohodaConfig:
        raw_ico = os.getenv("POHODA_ICO")
        ico = raw_ico.strip() if raw_ico else Defaults.ICO
        return cls(
            ico=ico,
            application=os.getenv("POHODA_APPLICATION", Defaults.APPLICATION),
        )


class ConfigLoader:
    pass

    @staticmethod
    def load(config_file: Path | None = None) -> PohodaConfig:
        config = PohodaConfig.from_env()
        if config_file is None:
            config_file = Path(Defaults.CONFIG_FILE)
        if config_file.exists():
            try:
                config = ConfigLoader._load_from_toml(config_file, config)
            except Exception as e:
                warnings.warn(
                    f"Failed to load config from {config_file}: {e}", stacklevel=2
                )
        return config

    @staticmethod
    def _load_from_toml(config_file: Path, base_config: PohodaConfig) -> PohodaConfig:
        with config_file.open("rb") as handle:
            data = tomllib.load(handle)
        section = _get_table(data, "data_pack")
        ico = base_config.ico
        if (value := section.get("ico")) is not None:
            ico = _coerce_str(value, key="data_pack.ico").strip()
        application = base_config.application
        if (value := section.get("application")) is not None:
            application = _coerce_str(value, key="data_pack.application")
        return PohodaConfig(ico=ico, application=application)


def _get_table(data: Mapping[str, object], key: str) -> Mapping[str, object]:
    value = data.get(key)
    if isinstance(value, Mapping):
        return cast("Mapping[str, object]", value)
    return {}


def _coerce_str(value: object, *, key: str) -> str:
    if isinstance(value, bool):
        raise ValueError(f"{key} must be a string, got bool")
    if isinstance(value, (str, int)):
        return str(value)
    raise ValueError(f"{key} must be a string, got {type(value).__name__}")
