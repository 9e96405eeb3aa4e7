"""Small helpers shared by CLI commands (option parsing, terminal messages)."""

from .messages import error, success, warn
from .pairs import parse_log_level, parse_routes

__all__ = ["error", "parse_log_level", "parse_routes", "success", "warn"]
