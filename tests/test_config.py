"""Tests for configuration loading and override behavior.

Environment variables override YAML values.
"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from fandomvis.utils.config import get_config, load_config, reset_config


@pytest.fixture(autouse=True)
def _reset_global_config(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure config singleton doesn't leak between tests."""
    # Override potentially conflicting env vars from local .env
    monkeypatch.delenv("QDRANT_HOST", raising=False)
    monkeypatch.delenv("QDRANT_LOCATION", raising=False)
    reset_config()
    yield
    reset_config()


def _write_yaml(path: Path, data: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data), encoding="utf-8")


def _paths(tmp_path: Path) -> dict:
    return {
        "works_path": str(tmp_path / "data" / "works.jsonl"),
        "reports_path": str(tmp_path / "data" / "reports"),
    }


def test_yaml_loads_defaults(tmp_path: Path) -> None:
    cfg_path = tmp_path / "config.yaml"
    _write_yaml(
        cfg_path,
        {
            "scrape": {"fandom": "Steven Universe", "threads": 4},
            "ships": {"min_works": 10},
            **_paths(tmp_path),
        },
    )

    cfg = load_config(cfg_path)

    assert cfg.scrape.fandom == "Steven Universe"
    assert cfg.scrape.threads == 4
    assert cfg.ships.min_works == 10
    assert cfg.ships.limit == 1000
    assert cfg.index.chunk_size == 1024
    assert cfg.report.width == 1150
    assert get_config() is cfg


def test_load_config_creates_data_directories(tmp_path: Path) -> None:
    cfg_path = tmp_path / "config.yaml"
    _write_yaml(cfg_path, _paths(tmp_path))

    load_config(cfg_path)

    assert (tmp_path / "data").is_dir()
    assert (tmp_path / "data" / "reports").is_dir()


def test_env_overrides_yaml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    cfg_path = tmp_path / "config.yaml"
    _write_yaml(
        cfg_path,
        {
            "index": {"qdrant_host": "yaml-host", "chunk_size": 10},
            **_paths(tmp_path),
        },
    )

    monkeypatch.setenv("QDRANT_HOST", "env-host")

    cfg = load_config(cfg_path)

    assert cfg.index.qdrant_host == "env-host"
    assert cfg.index.chunk_size == 10


def test_invalid_yaml_root_type_raises(tmp_path: Path) -> None:
    cfg_path = tmp_path / "config.yaml"
    cfg_path.write_text(yaml.safe_dump(["not", "a", "mapping"]), encoding="utf-8")

    with pytest.raises(ValueError, match="YAML config root must be a mapping"):
        load_config(cfg_path)


def test_missing_yaml_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yaml")


def test_color_values_must_be_unit_interval(tmp_path: Path) -> None:
    cfg_path = tmp_path / "config.yaml"
    _write_yaml(cfg_path, {"report": {"saturation": 1.5}, **_paths(tmp_path)})

    with pytest.raises(ValidationError):
        load_config(cfg_path)


def test_get_config_before_load_raises() -> None:
    with pytest.raises(RuntimeError, match="not initialized"):
        get_config()
