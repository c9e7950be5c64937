"""wargamer.security.redaction

Credential redaction helpers.

Application ids and access tokens are credentials. Redact them before anything hits logs.
"""

from __future__ import annotations

import copy
import re
from typing import Any

REDACTED = "[REDACTED]"

_REDACTION_PATTERNS: list[tuple[str, str]] = [
    # key=value pairs in query strings and messages
    (r"(?i)(application_id|access_token|api[_-]?key|secret|password)=[^&\s\"']+", r"\1=" + REDACTED),
    # access tokens are 40 hex characters
    (r"\b[a-fA-F0-9]{40}\b", REDACTED),
]

_SENSITIVE_FIELD_NAMES = {
    "application_id",
    "access_token",
    "api_key",
    "apikey",
    "secret",
    "password",
    "token",
    "authorization",
}


def redact_secrets(text: str) -> str:
    out = text
    for pattern, repl in _REDACTION_PATTERNS:
        out = re.sub(pattern, repl, out)
    return out


def sanitize_for_log(data: dict[str, Any]) -> dict[str, Any]:
    """Deep-copy and redact sensitive fields + embedded secrets."""

    def _walk(obj: Any) -> Any:
        if isinstance(obj, dict):
            new: dict[str, Any] = {}
            for k, v in obj.items():
                if str(k).lower() in _SENSITIVE_FIELD_NAMES:
                    new[k] = REDACTED
                else:
                    new[k] = _walk(v)
            return new
        if isinstance(obj, (list, tuple)):
            return [_walk(v) for v in obj]
        if isinstance(obj, str):
            return redact_secrets(obj)
        return obj

    return _walk(copy.deepcopy(data))
