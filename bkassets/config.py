"""
bkassets configuration.

Defaults are merged with an optional JSON file; command line options override both.
"""
import copy
import json

from pathlib import Path
from typing import Optional

from .bk.errors import ConfigError
from .bk.layout import ContainerLayout
from .bk.manifest import MANIFEST_NAME, ASSETS_DIR
from .utils.logger import logger


CONFIG_NAME = "bkassets.config.json"

DEFAULTS = {
    "layout": {
        "variant": "bk",
        "alignment": None,  # None = infer from the input on extract, take from the manifest on construct
        "fill": 0x00,
    },
    "codec": {
        "level": 9,
    },
    "workers": 1,
    "manifest": {
        "name": MANIFEST_NAME,
        "assets_dir": ASSETS_DIR,
    },
}


class BKAssetsConfig:
    def __init__(self, config_path: Optional[str] = None):
        self._config = copy.deepcopy(DEFAULTS)

        if config_path:
            self.config_path = Path(config_path)
            if not self.config_path.exists():
                raise ConfigError(f"config file not found: {self.config_path}")
        else:
            self.config_path = Path.cwd() / CONFIG_NAME

        if self.config_path.exists():
            self._load()
        else:
            logger.debug(f"no config file at {self.config_path}, using defaults")

    def _load(self):
        try:
            with open(self.config_path, "r", encoding="utf-8") as config_h:
                user_config = json.load(config_h)
        except json.JSONDecodeError as e:
            raise ConfigError(f"invalid JSON in {self.config_path}: {e}") from e

        if not isinstance(user_config, dict):
            raise ConfigError(f"{self.config_path} must hold a JSON object")

        self._deep_merge(self._config, user_config)
        logger.debug(f"loaded config from {self.config_path}")

    def get(self, *keys, default=None):
        """
        Get a nested config value by key path.
        e.g. config.get('layout', 'alignment')
        """
        value = self._config
        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        return value

    def set(self, *keys_and_value):
        *keys, value = keys_and_value
        target = self._config
        for key in keys[:-1]:
            target = target.setdefault(key, {})
        target[keys[-1]] = value

    @property
    def variant(self) -> str:
        return self.get("layout", "variant", default="bk")

    @property
    def alignment(self) -> Optional[int]:
        return self.get("layout", "alignment", default=None)

    @property
    def fill(self) -> int:
        return self.get("layout", "fill", default=0x00)

    @property
    def level(self) -> int:
        return self.get("codec", "level", default=9)

    @property
    def workers(self) -> int:
        return self.get("workers", default=1)

    @property
    def manifest_name(self) -> str:
        return self.get("manifest", "name", default=MANIFEST_NAME)

    @property
    def assets_dir(self) -> str:
        return self.get("manifest", "assets_dir", default=ASSETS_DIR)

    def layout(self, alignment: Optional[int] = None) -> ContainerLayout:
        """
        Container layout for the configured variant. A configured alignment wins over the
        argument (usually what a manifest recorded), which wins over the variant default.
        """
        try:
            base = ContainerLayout.variant(self.variant)
            return ContainerLayout(
                byte_order=base.byte_order,
                alignment=self.alignment or alignment or base.alignment,
                fill=self.fill,
                file_alignment=base.file_alignment,
                file_fill=base.file_fill,
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(str(e)) from e

    @staticmethod
    def _deep_merge(base: dict, override: dict):
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                BKAssetsConfig._deep_merge(base[key], value)
            else:
                base[key] = value
