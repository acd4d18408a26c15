"""
Client configuration

Settings are read from a JSON file:

    {
        "api_key": "my_key-<service-id>-<secret>",
        "base_url": "https://rest-api.notify.gov.au",
        "timeout": 30
    }

The NOTIFY_API_KEY and NOTIFY_BASE_URL environment variables take precedence
over the file.
"""

import json
import os
from typing import Optional

NOTIFY_BASE_URL = "https://rest-api.notify.gov.au"


def get_default_config_dir() -> str:
    """Get the default configuration directory following XDG standards"""
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        return os.path.join(xdg_config_home, "notify_client")

    home = os.environ.get("HOME")
    if home:
        return os.path.join(home, ".config", "notify_client")

    # Last resort: current directory
    return os.path.join(os.getcwd(), ".config", "notify_client")


def get_default_config_path() -> str:
    return os.environ.get("NOTIFY_API_CONFIG") or os.path.join(get_default_config_dir(), "config.json")


class NotifyConfig:
    """Configuration for the Notify API client"""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path or get_default_config_path()
        self.api_key: str = ""
        self.base_url: str = NOTIFY_BASE_URL
        self.timeout: Optional[float] = None

        self._load_config()

    def _load_config(self):
        """Load configuration from file, then apply environment overrides"""
        env_key = os.environ.get("NOTIFY_API_KEY")

        if os.path.exists(self.config_path):
            with open(self.config_path, 'r') as f:
                config_data = json.load(f)
        elif env_key:
            config_data = {}
        else:
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        self.api_key = env_key or config_data.get('api_key', "")
        if not self.api_key:
            raise ValueError("Missing required config field: api_key")

        self.base_url = os.environ.get("NOTIFY_BASE_URL") or config_data.get('base_url') or NOTIFY_BASE_URL

        timeout = config_data.get('timeout')
        if timeout is not None:
            try:
                self.timeout = float(timeout)
            except (TypeError, ValueError):
                raise ValueError(f"Invalid timeout in config: {timeout!r}")

    def to_dict(self) -> dict:
        data = {"api_key": self.api_key, "base_url": self.base_url}
        if self.timeout is not None:
            data["timeout"] = self.timeout
        return data


def write_config(config_path: str, api_key: str, base_url: Optional[str] = None,
                 timeout: Optional[float] = None) -> None:
    config_data = {
        "api_key": api_key,
        "base_url": base_url or NOTIFY_BASE_URL,
        "timeout": timeout,
    }
    # Remove None values
    config_data = {k: v for k, v in config_data.items() if v is not None}

    directory = os.path.dirname(config_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(config_path, 'w') as f:
        json.dump(config_data, f, indent=2)
    try:
        os.chmod(config_path, 0o600)
    except OSError:
        # Ignore chmod issues on non-POSIX
        pass
