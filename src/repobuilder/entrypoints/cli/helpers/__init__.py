"""CLI helpers for REPOBUILDER.

Utilities used by the command-line interface: database URL resolution and
sanitization, logger-level option parsing, and message emitters that write to
stderr with emoji→ASCII fallbacks.
"""

from .db_url import resolve_db_url, sanitize_url
from .messages import error, success, warn

__all__ = ["error", "resolve_db_url", "sanitize_url", "success", "warn"]
