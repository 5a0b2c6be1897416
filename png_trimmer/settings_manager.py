from __future__ import annotations

import json
import os
from typing import Any

from .logger import get_logger
from .ops.download import default_download_dir

_logger = get_logger("settings")


class SettingsManager:
    def __init__(self, settings_path: str):
        self.settings_path = settings_path
        self._settings: dict[str, Any] = {}
        self.load()

    DEFAULTS: dict[str, Any] = {
        "download_dir": "",
        "window_width": 480,
        "window_height": 320,
    }

    def load(self) -> None:
        try:
            if os.path.exists(self.settings_path):
                with open(self.settings_path, encoding="utf-8") as f:
                    data = json.load(f)
                    if isinstance(data, dict):
                        self._settings = data
                        _logger.debug("settings loaded: %s", self.settings_path)
                        return
        except (OSError, ValueError) as e:
            _logger.warning("settings load failed: %s", e)
        self._settings = {}

    def save(self) -> None:
        try:
            os.makedirs(os.path.dirname(self.settings_path) or ".", exist_ok=True)
            with open(self.settings_path, "w", encoding="utf-8") as f:
                json.dump(self._settings, f, ensure_ascii=False, indent=2)
            _logger.debug("settings saved: %s", self.settings_path)
        except OSError as e:
            _logger.error("settings save failed: %s", e)

    def get(self, key: str, default: Any = None) -> Any:
        if key in self._settings:
            return self._settings[key]
        if default is not None:
            return default
        return self.DEFAULTS.get(key)

    def has(self, key: str) -> bool:
        return key in self._settings

    def set(self, key: str, value: Any) -> None:
        self._settings[key] = value
        self.save()

    @property
    def data(self) -> dict[str, Any]:
        return self._settings

    @property
    def download_dir(self) -> str:
        val = self.get("download_dir")
        if isinstance(val, str) and val.strip():
            return os.path.abspath(os.path.expanduser(val.strip()))
        return default_download_dir()

    def window_size(self) -> tuple[int, int]:
        try:
            w = int(self.get("window_width"))
            h = int(self.get("window_height"))
            if w > 0 and h > 0:
                return w, h
            _logger.warning("saved window size invalid: %sx%s", w, h)
        except (TypeError, ValueError) as e:
            _logger.warning("failed to parse window size: %s", e)
        return int(self.DEFAULTS["window_width"]), int(self.DEFAULTS["window_height"])
