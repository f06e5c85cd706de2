"""Configuration package exports."""

from .loader import CONFIG_ENV_VAR, load_config
from .models import FetchConfig, parse_header

__all__ = ["CONFIG_ENV_VAR", "FetchConfig", "load_config", "parse_header"]
