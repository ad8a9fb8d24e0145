"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``   committed defaults (or the file passed as --config)
  2. ``local.toml``            optional overlay in the same directory (gitignored)
  3. ``.env``                  found from the working directory upwards (gitignored)
  4. Environment variables     ``AESTHETIC_ADVISOR_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

Layout of the TOML file::

    debug = false

    [data]     questions_file, relations_file, candidates_file, reports_dir
    [engine]   negative_tokens, shuffle_seed, confidence_stop
    [logging]  level, log_file, json_format

Unknown sections and keys are rejected. CLI commands and
``DiagnosticSession.from_config`` receive an ``AppConfig``; the engine
functions themselves take plain arguments and never read configuration.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

# ── Sub-config models ─────────────────────────────────────────────────────────


class DataConfig(BaseModel):
    """Filesystem paths for the question bank, relation matrix and catalog."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    questions_file: str = "config/data/questions.json"
    relations_file: str = "config/data/relations.json"
    candidates_file: str = "config/data/candidates.json"
    reports_dir: str = "data/reports"


class EngineConfig(BaseModel):
    """Diagnostic engine behaviour."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    negative_tokens: list[str] = ["não", "nao"]
    shuffle_seed: Optional[int] = None
    confidence_stop: Optional[int] = None

    @field_validator("negative_tokens")
    @classmethod
    def validate_tokens(cls, v: list[str]) -> list[str]:
        tokens = [t.strip() for t in v if t and t.strip()]
        if not tokens:
            raise ValueError("negative_tokens must contain at least one token.")
        return tokens

    @field_validator("confidence_stop")
    @classmethod
    def validate_confidence_stop(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and not 1 <= v <= 100:
            raise ValueError(f"confidence_stop must be in [1, 100], got {v}.")
        return v


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    level: str = "INFO"
    log_file: str = "data/logs/advisor.log"
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration.

    Built by ``load_config()`` from the merged TOML and environment layers.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    data: DataConfig = DataConfig()
    engine: EngineConfig = EngineConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "default.toml"
LOCAL_OVERRIDE_NAME = "local.toml"


def _parse_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes")


# env var -> (section, key, parser); section None means a top-level key
_ENV_OVERRIDES: dict[str, tuple[Optional[str], str, Callable[[str], Any]]] = {
    "AESTHETIC_ADVISOR_LOG_LEVEL":    ("logging", "level", str),
    "AESTHETIC_ADVISOR_SHUFFLE_SEED": ("engine", "shuffle_seed", int),
    "AESTHETIC_ADVISOR_DEBUG":        (None, "debug", _parse_flag),
}

_DATA_FILES = {
    "questions_file":  "questions.json",
    "relations_file":  "relations.json",
    "candidates_file": "candidates.json",
}


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: TOML file to read. Defaults to the ``config/default.toml``
            shipped next to the package. A ``local.toml`` in the same
            directory is overlaid section by section.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If ``config_path`` does not exist.
        pydantic.ValidationError: If a value is invalid or a section/key is
            unknown (typos such as ``negative_token`` are rejected).
    """
    load_dotenv(find_dotenv(usecwd=True), override=False)

    config_path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create config/default.toml or pass --config."
        )

    raw = _read_toml(config_path)
    local_path = config_path.parent / LOCAL_OVERRIDE_NAME
    if local_path.exists():
        raw = _overlay(raw, _read_toml(local_path))

    return AppConfig.model_validate(_apply_env_overrides(raw))


def _read_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def _overlay(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Overlay ``override`` on ``base``: sections merge key by key, scalars replace."""
    merged = dict(base)
    for key, val in override.items():
        if isinstance(val, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **val}
        else:
            merged[key] = val
    return merged


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply ``AESTHETIC_ADVISOR_*`` env vars on top of the TOML values.

    AESTHETIC_ADVISOR_DATA_DIR points all three data files at one directory;
    the others are listed in ``_ENV_OVERRIDES``.
    """
    for env_var, (section, key, parse) in _ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if not value:
            continue
        target = raw if section is None else raw.setdefault(section, {})
        target[key] = parse(value)

    if data_dir := os.environ.get("AESTHETIC_ADVISOR_DATA_DIR"):
        data = raw.setdefault("data", {})
        for key, filename in _DATA_FILES.items():
            data[key] = str(Path(data_dir) / filename)

    return raw
