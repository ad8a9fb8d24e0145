"""
Tests for aesthetic_advisor/config.py.

What we test
------------
load_config():
  - Reads an explicit TOML file into a validated AppConfig.
  - Missing file -> FileNotFoundError.
  - local.toml next to the config file is deep-merged on top.
  - AESTHETIC_ADVISOR_* environment variables override file values.
  - Top-level debug is honoured; unknown sections and keys are rejected.
  - The shipped config/default.toml loads.

Sub-config validation:
  - Invalid log level, empty negative token list and out-of-range
    confidence_stop are rejected.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from aesthetic_advisor.config import (
    AppConfig,
    EngineConfig,
    LoggingConfig,
    _overlay,
    load_config,
)

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _toml(tmp_path: Path, text: str, name: str = "advisor.toml") -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadConfig:
    def test_explicit_file(self, config_file, data_dir):
        config = load_config(config_file)
        assert isinstance(config, AppConfig)
        assert config.data.questions_file == (data_dir / "questions.json").as_posix()
        assert config.engine.shuffle_seed == 11
        assert config.engine.negative_tokens == ["não", "nao"]
        assert config.logging.level == "WARNING"
        assert config.debug is False

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_config(tmp_path / "missing.toml")

    def test_defaults_for_missing_sections(self, tmp_path):
        config = load_config(_toml(tmp_path, ""))
        assert config.data.questions_file == "config/data/questions.json"
        assert config.engine.shuffle_seed is None
        assert config.engine.confidence_stop is None
        assert config.logging.level == "INFO"

    def test_local_toml_merged(self, tmp_path):
        path = _toml(tmp_path, '[engine]\nshuffle_seed = 1\n[logging]\nlevel = "INFO"\n')
        _toml(tmp_path, "[engine]\nconfidence_stop = 80\n", name="local.toml")
        config = load_config(path)
        assert config.engine.shuffle_seed == 1
        assert config.engine.confidence_stop == 80

    def test_top_level_debug(self, tmp_path):
        config = load_config(_toml(tmp_path, "debug = true\n"))
        assert config.debug is True

    def test_unknown_section_rejected(self, tmp_path):
        with pytest.raises(ValidationError, match="project"):
            load_config(_toml(tmp_path, "[project]\ndebug = true\n"))

    def test_misspelled_key_rejected(self, tmp_path):
        with pytest.raises(ValidationError, match="negative_token"):
            load_config(_toml(tmp_path, '[engine]\nnegative_token = ["nunca"]\n'))

    def test_local_toml_overrides_debug(self, tmp_path):
        path = _toml(tmp_path, "debug = false\n")
        _toml(tmp_path, "debug = true\n", name="local.toml")
        assert load_config(path).debug is True

    def test_shipped_default(self):
        config = load_config(PROJECT_ROOT / "config" / "default.toml")
        assert config.data.candidates_file.endswith("candidates.json")
        assert config.engine.negative_tokens == ["não", "nao"]
        assert config.debug is False


class TestEnvOverrides:
    def test_log_level(self, config_file, monkeypatch):
        monkeypatch.setenv("AESTHETIC_ADVISOR_LOG_LEVEL", "debug")
        assert load_config(config_file).logging.level == "DEBUG"

    def test_shuffle_seed(self, config_file, monkeypatch):
        monkeypatch.setenv("AESTHETIC_ADVISOR_SHUFFLE_SEED", "314")
        assert load_config(config_file).engine.shuffle_seed == 314

    def test_data_dir(self, config_file, tmp_path, monkeypatch):
        monkeypatch.setenv("AESTHETIC_ADVISOR_DATA_DIR", str(tmp_path / "outro"))
        data = load_config(config_file).data
        assert Path(data.questions_file) == tmp_path / "outro" / "questions.json"
        assert Path(data.relations_file) == tmp_path / "outro" / "relations.json"
        assert Path(data.candidates_file) == tmp_path / "outro" / "candidates.json"

    @pytest.mark.parametrize("value, expected", [("1", True), ("true", True), ("no", False)])
    def test_debug(self, config_file, monkeypatch, value, expected):
        monkeypatch.setenv("AESTHETIC_ADVISOR_DEBUG", value)
        assert load_config(config_file).debug is expected


class TestSubConfigValidation:
    def test_invalid_log_level(self):
        with pytest.raises(ValidationError, match="Log level"):
            LoggingConfig(level="verbose")

    def test_log_level_uppercased(self):
        assert LoggingConfig(level="warning").level == "WARNING"

    def test_empty_negative_tokens(self):
        with pytest.raises(ValidationError, match="at least one token"):
            EngineConfig(negative_tokens=["", "  "])

    def test_negative_tokens_stripped(self):
        assert EngineConfig(negative_tokens=[" não "]).negative_tokens == ["não"]

    @pytest.mark.parametrize("value", [0, 101])
    def test_confidence_stop_range(self, value):
        with pytest.raises(ValidationError, match="confidence_stop"):
            EngineConfig(confidence_stop=value)

    def test_frozen(self):
        config = AppConfig()
        with pytest.raises(ValidationError):
            config.debug = True


class TestOverlay:
    def test_sections_merge_key_by_key(self):
        base = {"engine": {"a": 1, "b": 2}, "debug": False}
        merged = _overlay(base, {"engine": {"b": 3}, "debug": True})
        assert merged == {"engine": {"a": 1, "b": 3}, "debug": True}
        assert base == {"engine": {"a": 1, "b": 2}, "debug": False}

    def test_new_section_added(self):
        assert _overlay({}, {"logging": {"level": "DEBUG"}}) == {"logging": {"level": "DEBUG"}}
