import os
from typing import Any, Dict

import yaml
from dotenv import load_dotenv

load_dotenv()  # Loads POSTMAN_API_KEY (and friends) from .env into the environment

DEFAULT_BASE_URL = "https://api.getpostman.com"
API_KEY_ENV_VAR = "POSTMAN_API_KEY"


class ConfigurationError(ValueError):
    """Raised when the Postman tools are missing required configuration."""


class ConfigLoader:
    _instance = None
    _config = None

    def __new__(cls):
        """
        Create a singleton instance of ConfigLoader.
        Loads configuration from YAML file on first instantiation.
        """
        if cls._instance is None:
            cls._load_config()
            cls._instance = super(ConfigLoader, cls).__new__(cls)
        return cls._instance

    @classmethod
    def _load_config(cls):
        """
        Load the configuration from the YAML file into the class variable _config.
        """
        config_path = os.environ.get("POSTMAN_TOOLS_CONFIG") or os.path.join(
            os.path.dirname(__file__), "..", "config.yaml"
        )
        config_path = os.path.abspath(config_path)
        if not os.path.isfile(config_path):
            raise ConfigurationError(f"Config file not found: {config_path}")
        with open(config_path, "r") as f:
            cls._config = yaml.safe_load(f) or {}

    @classmethod
    def reset(cls):
        """Forget the cached instance so the next access re-reads the file."""
        cls._instance = None
        cls._config = None

    def get_config(self):
        """
        Return the loaded configuration dictionary.
        """
        return self._config


def get_config():
    """
    Helper function to get the singleton configuration instance's config dictionary.
    """
    return ConfigLoader().get_config()


def _verify_ssl(value: Any) -> bool:
    # Only an explicit YAML boolean may turn verification off
    if value is None:
        return True
    if not isinstance(value, bool):
        raise ConfigurationError(f"verify_ssl must be true or false, got {value!r}")
    return value


def get_postman_settings() -> Dict[str, Any]:
    """Merge config.yaml with the API key taken from the environment."""
    _cfg = get_config() or {}
    base_url = (_cfg.get("postman_api_url") or DEFAULT_BASE_URL).rstrip("/")
    return {
        "base_url": base_url,
        "accept_header": _cfg.get("accept_header") or None,
        "verify_ssl": _verify_ssl(_cfg.get("verify_ssl")),
        "log_level": _cfg.get("log_level") or "INFO",
        "api_key": os.environ.get(API_KEY_ENV_VAR) or None,
    }
