"""CLI helpers for PVTRACK.

Utilities used by the command-line interface: store URL sanitization for safe
display, logger-level option parsing, and message emitters that write to
stderr with emoji to ASCII fallbacks.
"""

from .messages import error, success, warn
from .store_url import sanitize_store_url

__all__ = ["error", "sanitize_store_url", "success", "warn"]
