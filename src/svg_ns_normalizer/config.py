"""Configuration persistence for svg-ns-normalizer.

Settings live in a JSON file under `%APPDATA%\\SvgNsNormalizer\\config.json`
(or `SVG_NS_NORMALIZER_CONFIG` when set). The CLI and the clipboard watcher
read the same file, so a setting changed for one applies to both.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Final

APP_DIR_NAME: Final[str] = "SvgNsNormalizer"
CONFIG_FILE_NAME: Final[str] = "config.json"
CONFIG_ENV_VAR: Final[str] = "SVG_NS_NORMALIZER_CONFIG"


def _default_appdata_dir() -> Path:
    appdata = os.getenv("APPDATA")
    if appdata:
        return Path(appdata)
    return Path.home() / "AppData" / "Roaming"


def get_config_path() -> Path:
    override = os.getenv(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return _default_appdata_dir() / APP_DIR_NAME / CONFIG_FILE_NAME


@dataclass
class AppConfig:
    """User-configurable settings.

    Notes:
    - `strip_foreign_prefixes` also removes numbered prefixes that are not bound
      to XLink. Off by default because it changes more than the parse fix needs.
    - `request_timeout_s` of 0 means no timeout for fetches.
    """

    listen_enabled: bool = False
    debounce_ms: int = 200
    # Documents with embedded base64 rasters can legitimately reach tens of MB.
    max_svg_chars: int = 200_000_000

    request_timeout_s: float = 30.0
    strip_foreign_prefixes: bool = False

    cache_enabled: bool = True
    cache_max_items: int = 128

    log_level: str = "INFO"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "AppConfig":
        cfg = cls()
        known = {f.name for f in fields(cls)}
        for k, v in raw.items():
            if k in known:
                setattr(cfg, k, v)
        return cfg

    @classmethod
    def load(cls, path: Path | None = None) -> "AppConfig":
        path = path or get_config_path()
        if not path.exists():
            return cls()
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logging.getLogger("svg_ns_normalizer.config").warning("config_unreadable path=%s error=%s", path, e)
            return cls()
        if not isinstance(data, dict):
            return cls()
        return cls.from_dict(data)

    def save(self, path: Path | None = None) -> None:
        path = path or get_config_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")
