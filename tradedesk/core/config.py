from pathlib import Path
from typing import Any, Dict, Optional, Union
import os

import yaml
from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..editor.draft import Timeframe
from .exceptions import ConfigurationError

# Load environment variables from .env file
load_dotenv()

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent.parent / "strategies" / "config" / "catalog.yaml"

class Settings(BaseSettings):
    app_name: str = "Tradedesk"
    version: str = "0.1.0"
    log_level: str = "INFO"
    environment: str = "development"

    # Backend API
    api_base_url: str = "http://localhost:8000/api/v1"
    api_token: Optional[str] = None
    request_timeout: float = 30.0

    # Editor defaults
    default_symbol: str = "EURUSD"
    default_timeframe: str = "H1"
    catalog_path: Path = DEFAULT_CATALOG_PATH

    model_config = SettingsConfigDict(
        env_prefix="TRADEDESK_",
        env_file=".env",
        extra="ignore"
    )

    @field_validator("default_timeframe")
    @classmethod
    def _known_timeframe(cls, value: str) -> str:
        value = value.upper()
        if value not in {tf.value for tf in Timeframe}:
            raise ValueError(f"Unknown timeframe: {value}")
        return value

def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """Load a YAML document and expand ${VAR} references"""
    try:
        with open(path, 'r', encoding='utf-8') as file:
            data = yaml.safe_load(file)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Configuration file not found: {path}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Expected a mapping at the top of {path}")

    return _expand_env_vars(data)

def _expand_env_vars(obj):
    """Recursively expand environment variables in config"""
    if isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    elif isinstance(obj, str) and obj.startswith("${") and obj.endswith("}"):
        env_var = obj[2:-1]
        return os.getenv(env_var, obj)
    return obj

def get_settings() -> Settings:
    """Build settings from the environment"""
    return Settings()
