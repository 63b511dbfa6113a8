"""Typed configuration loader for `config.yaml`."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, cast

import yaml


def _mapping(value: Any, field_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValueError(f"Expected mapping for '{field_name}'")
    return cast(Mapping[str, Any], value)


def _str(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Expected non-empty string for '{field_name}'")
    return value.strip()


def _int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Expected integer for '{field_name}'")
    return value


def _float(value: Any, field_name: str) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    raise ValueError(f"Expected float for '{field_name}'")


def _bool(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"Expected bool for '{field_name}'")
    return value


@dataclass(frozen=True, slots=True)
class RenderConfig:
    width: int = 80
    height: int = 40
    simplification: float = 0.01
    area_mode: bool = False

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> RenderConfig:
        default = cls()
        width = _int(raw.get("width", default.width), "render.width")
        height = _int(raw.get("height", default.height), "render.height")
        simplification = _float(
            raw.get("simplification", default.simplification), "render.simplification"
        )
        if width <= 0:
            raise ValueError("render.width must be > 0")
        if height <= 0:
            raise ValueError("render.height must be > 0")
        if simplification < 0:
            raise ValueError("render.simplification must be >= 0")
        return cls(
            width=width,
            height=height,
            simplification=simplification,
            area_mode=_bool(raw.get("area_mode", default.area_mode), "render.area_mode"),
        )


@dataclass(frozen=True, slots=True)
class GeoConfig:
    locale: str = "uk"
    viewport_padding_deg: float = 0.5

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> GeoConfig:
        default = cls()
        locale = _str(raw.get("locale", default.locale), "geo.locale").casefold()
        if locale not in {"uk", "en"}:
            raise ValueError("geo.locale must be one of: en, uk")
        padding = _float(
            raw.get("viewport_padding_deg", default.viewport_padding_deg),
            "geo.viewport_padding_deg",
        )
        if padding < 0:
            raise ValueError("geo.viewport_padding_deg must be >= 0")
        return cls(locale=locale, viewport_padding_deg=padding)


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    log_file: Path | None = None
    verbose: bool = False

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], root_dir: Path) -> LoggingConfig:
        log_file_raw = raw.get("log_file")
        log_file: Path | None = None
        if log_file_raw is not None:
            p = Path(_str(log_file_raw, "logging.log_file"))
            log_file = p if p.is_absolute() else root_dir / p
        return cls(
            log_file=log_file,
            verbose=_bool(raw.get("verbose", False), "logging.verbose"),
        )


@dataclass(frozen=True, slots=True)
class AppConfig:
    source_path: Path | None
    render: RenderConfig
    geo: GeoConfig
    logging: LoggingConfig

    @classmethod
    def default(cls) -> AppConfig:
        return cls(source_path=None, render=RenderConfig(), geo=GeoConfig(), logging=LoggingConfig())

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], source_path: Path) -> AppConfig:
        root_dir = source_path.parent.resolve()
        return cls(
            source_path=source_path.resolve(),
            render=RenderConfig.from_mapping(_mapping(raw.get("render"), "render")),
            geo=GeoConfig.from_mapping(_mapping(raw.get("geo"), "geo")),
            logging=LoggingConfig.from_mapping(_mapping(raw.get("logging"), "logging"), root_dir),
        )


def load_config(path: str | Path | None) -> AppConfig:
    """Load and validate the YAML config file; None yields the defaults."""
    if path is None:
        return AppConfig.default()
    cfg_path = Path(path).resolve()
    if not cfg_path.exists():
        raise FileNotFoundError(f"Config file not found: {cfg_path}")
    with cfg_path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise ValueError("Top-level config must be a YAML mapping")
    return AppConfig.from_mapping(cast(Mapping[str, Any], raw), cfg_path)
