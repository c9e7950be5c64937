"""wargamer.security

Keep credentials out of logs and error messages.
"""

from .redaction import redact_secrets, sanitize_for_log

__all__ = ["redact_secrets", "sanitize_for_log"]
