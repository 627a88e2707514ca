"""Configuration helpers for the Smart Closet app."""

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Optional

DEFAULT_STORAGE_KEY = "smartClosetData"
# Browsers cap localStorage at roughly five megabytes per origin.
DEFAULT_STORAGE_QUOTA_BYTES = 5 * 1024 * 1024
DEFAULT_RECENT_ITEMS_LIMIT = 4


@dataclass
class ClosetConfig:
    """Configuration values for the closet app.

    The catalog lives in a single named storage slot; ``storage_backend`` picks
    where that slot is kept (a JSON file under ``data_dir`` or process memory).
    """

    data_dir: str = "data"
    storage_key: str = DEFAULT_STORAGE_KEY
    storage_backend: str = "json"
    storage_quota_bytes: Optional[int] = DEFAULT_STORAGE_QUOTA_BYTES
    recent_items_limit: int = DEFAULT_RECENT_ITEMS_LIMIT
    environment: str | None = None

    @classmethod
    def from_env(cls) -> "ClosetConfig":
        """Build a config from environment variables or an environment YAML file.

        Environment specific YAML lives in ``config/environments/<env>.yaml`` by
        default and is overridden key by key by upper-cased environment variables.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("CLOSET_CONFIG_DIR", "config/environments"))
        yaml_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            yaml_config = cls._load_yaml_config(path)

        def get_value(key: str, default: Optional[str] = None) -> Optional[str]:
            env_key = key.upper()
            return os.getenv(env_key, yaml_config.get(key, default))

        data_dir = get_value("data_dir", "data")
        storage_key = get_value("storage_key", DEFAULT_STORAGE_KEY)
        storage_backend = get_value("storage_backend", "json")
        quota = get_value("storage_quota_bytes")
        recent_limit = get_value("recent_items_limit")

        return cls(
            data_dir=str(data_dir or "data"),
            storage_key=str(storage_key or DEFAULT_STORAGE_KEY),
            storage_backend=str(storage_backend or "json").lower(),
            storage_quota_bytes=cls._parse_quota(quota),
            recent_items_limit=int(recent_limit) if recent_limit else DEFAULT_RECENT_ITEMS_LIMIT,
            environment=env_name,
        )

    @staticmethod
    def _parse_quota(raw: Optional[str]) -> Optional[int]:
        """Zero or a negative value disables the quota."""

        if raw is None or raw == "":
            return DEFAULT_STORAGE_QUOTA_BYTES
        value = int(raw)
        return value if value > 0 else None

    @staticmethod
    def _load_yaml_config(path: Path) -> dict:
        """Parse a minimal YAML/INI-style config without external dependencies."""

        config: dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if (value.startswith("\"") and value.endswith("\"")) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]
            config[key.strip()] = value
        return config
