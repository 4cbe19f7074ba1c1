from pathlib import Path

import pytest

from svg_ns_normalizer.config import CONFIG_ENV_VAR, AppConfig, get_config_path


@pytest.fixture
def config_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    path = tmp_path / "cfg" / "config.json"
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
    return path


def test_config_path_override(config_path: Path) -> None:
    assert get_config_path() == config_path


def test_config_path_uses_appdata(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.setenv("APPDATA", str(tmp_path))
    assert get_config_path() == tmp_path / "SvgNsNormalizer" / "config.json"


def test_missing_file_gives_defaults(config_path: Path) -> None:
    assert AppConfig.load() == AppConfig()


def test_save_then_load(config_path: Path) -> None:
    cfg = AppConfig(debounce_ms=50, strip_foreign_prefixes=True, log_level="DEBUG")
    cfg.save()
    assert config_path.exists()
    assert AppConfig.load() == cfg


def test_corrupt_file_gives_defaults(config_path: Path) -> None:
    config_path.parent.mkdir(parents=True)
    config_path.write_text("{not json", encoding="utf-8")
    assert AppConfig.load() == AppConfig()

    config_path.write_text("[1, 2]", encoding="utf-8")
    assert AppConfig.load() == AppConfig()


def test_unknown_keys_are_ignored() -> None:
    cfg = AppConfig.from_dict({"cache_max_items": 7, "dpi": 300})
    assert cfg.cache_max_items == 7
    assert not hasattr(cfg, "dpi")
