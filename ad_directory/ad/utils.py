from __future__ import annotations

from datetime import datetime
from typing import Any

from ldap3.utils.conv import escape_filter_chars

# 100ns intervals between 1601-01-01 and 1970-01-01
_FILETIME_EPOCH_SECONDS = 11_644_473_600


def escape_ldap_filter_value(value: str) -> str:
    """RFC 4515 escaping of ``*``, ``(``, ``)``, backslash and NUL in filter values."""
    return escape_filter_chars(str(value))


def filetime_to_unix(v: Any) -> float | None:
    """Convert Windows FILETIME (100ns since 1601-01-01) to a Unix timestamp.

    See http://support.microsoft.com/kb/555936. Zero, negative or unparsable
    values (account never logged on) give None.
    """
    if isinstance(v, datetime):
        return v.timestamp()
    try:
        n = int(v)
    except (TypeError, ValueError):
        return None
    if n <= 0:
        return None
    return (n / 10_000_000) - _FILETIME_EPOCH_SECONDS

