from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional
import logging
import os
import tomllib

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "BIBRECON_CONFIG"
_DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[1] / "config" / "runtime.toml"


@dataclass(frozen=True)
class MatchingConfig:
    year_window: int = 5
    max_compare_bytes: int = 255
    title_similar_ratio: float = 0.2
    title_similar_max_edits: int = 5
    title_very_similar_ratio: float = 0.1
    author_similar_ratio: float = 0.2
    author_similar_max_edits: int = 2
    author_very_similar_ratio: float = 0.1


@dataclass(frozen=True)
class FormattingConfig:
    doi_url_prefix: str = "https://doi.org/"
    arxiv_url_abs_prefix: str = "https://arxiv.org/abs/"


@dataclass(frozen=True)
class DiagnosticsConfig:
    possible_duplicate_min_ratio: int = 88


@dataclass(frozen=True)
class RuntimeConfig:
    matching: MatchingConfig
    formatting: FormattingConfig
    diagnostics: DiagnosticsConfig


def _default_config() -> RuntimeConfig:
    return RuntimeConfig(
        matching=MatchingConfig(),
        formatting=FormattingConfig(),
        diagnostics=DiagnosticsConfig(),
    )


def _safe_int(value: Any, fallback: int, minimum: int = 1) -> int:
    if isinstance(value, bool):
        return fallback
    try:
        parsed = int(value)
        return parsed if parsed >= minimum else fallback
    except Exception:
        return fallback


def _safe_ratio(value: Any, fallback: float) -> float:
    if isinstance(value, bool):
        return fallback
    try:
        parsed = float(value)
        return parsed if parsed >= 0 else fallback
    except Exception:
        return fallback


def _str_field(d: dict, key: str, default: str) -> str:
    val = d.get(key, default)
    if not isinstance(val, str) or not val.strip():
        return default
    return val.strip()


def _section(raw: Any, name: str) -> dict:
    section = raw.get(name) if isinstance(raw, dict) else {}
    if not isinstance(section, dict):
        logger.warning("Runtime config section is not a table; using defaults", extra={"section": name})
        return {}
    return section


def _resolve_path(config_path: Optional[Path]) -> Path:
    if config_path is not None:
        return Path(config_path)
    from_env = (os.environ.get(CONFIG_PATH_ENV) or "").strip()
    if from_env:
        return Path(from_env)
    return _DEFAULT_CONFIG_PATH


def load_runtime_config(config_path: Optional[Path] = None) -> RuntimeConfig:
    cfg = _default_config()
    path = _resolve_path(config_path)
    try:
        with path.open("rb") as handle:
            raw = tomllib.load(handle)
    except FileNotFoundError:
        logger.warning("Runtime config file not found; using defaults", extra={"path": str(path)})
        return cfg
    except tomllib.TOMLDecodeError:
        logger.exception("Runtime config parse failed; using defaults", extra={"path": str(path)})
        return cfg
    except Exception:
        logger.exception("Runtime config load failed; using defaults", extra={"path": str(path)})
        return cfg

    matching_raw = _section(raw, "matching")
    formatting_raw = _section(raw, "formatting")
    diagnostics_raw = _section(raw, "diagnostics")

    m = cfg.matching
    matching = MatchingConfig(
        year_window=_safe_int(matching_raw.get("year_window", m.year_window), m.year_window, minimum=0),
        max_compare_bytes=_safe_int(matching_raw.get("max_compare_bytes", m.max_compare_bytes), m.max_compare_bytes),
        title_similar_ratio=_safe_ratio(
            matching_raw.get("title_similar_ratio", m.title_similar_ratio), m.title_similar_ratio
        ),
        title_similar_max_edits=_safe_int(
            matching_raw.get("title_similar_max_edits", m.title_similar_max_edits), m.title_similar_max_edits, minimum=0
        ),
        title_very_similar_ratio=_safe_ratio(
            matching_raw.get("title_very_similar_ratio", m.title_very_similar_ratio), m.title_very_similar_ratio
        ),
        author_similar_ratio=_safe_ratio(
            matching_raw.get("author_similar_ratio", m.author_similar_ratio), m.author_similar_ratio
        ),
        author_similar_max_edits=_safe_int(
            matching_raw.get("author_similar_max_edits", m.author_similar_max_edits), m.author_similar_max_edits, minimum=0
        ),
        author_very_similar_ratio=_safe_ratio(
            matching_raw.get("author_very_similar_ratio", m.author_very_similar_ratio), m.author_very_similar_ratio
        ),
    )

    f = cfg.formatting
    formatting = FormattingConfig(
        doi_url_prefix=_str_field(formatting_raw, "doi_url_prefix", f.doi_url_prefix),
        arxiv_url_abs_prefix=_str_field(formatting_raw, "arxiv_url_abs_prefix", f.arxiv_url_abs_prefix),
    )

    d = cfg.diagnostics
    min_ratio = _safe_int(
        diagnostics_raw.get("possible_duplicate_min_ratio", d.possible_duplicate_min_ratio),
        d.possible_duplicate_min_ratio,
    )
    if min_ratio > 100:
        min_ratio = d.possible_duplicate_min_ratio

    return RuntimeConfig(
        matching=matching,
        formatting=formatting,
        diagnostics=DiagnosticsConfig(possible_duplicate_min_ratio=min_ratio),
    )


RUNTIME_CONFIG = load_runtime_config()
