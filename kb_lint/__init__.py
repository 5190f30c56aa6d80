"""Integrity checks for a Markdown interview-prep knowledge base."""

from .config import Config, load_config
from .issues import ConfigError, Issue, KbLintError, Report, Severity
from .runner import audit

__version__ = "0.1.0"

__all__ = [
    "Config",
    "ConfigError",
    "Issue",
    "KbLintError",
    "Report",
    "Severity",
    "audit",
    "load_config",
]
