"""Observability — logging setup."""

from cleat.core.observability.logging_config import configure_from_env, parse_level, setup_logging

__all__ = ["configure_from_env", "parse_level", "setup_logging"]
