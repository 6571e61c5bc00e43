from __future__ import annotations

from typing import Any


class DirectoryError(Exception):
    """Base error for directory operations.

    Keeps the server's numeric result code and description as separate fields;
    ``str()`` joins them as ``"<code>: <description>"`` for display.
    """

    def __init__(self, description: str = "", code: int | None = None) -> None:
        super().__init__(description)
        self.code = code
        self.description = description

    @classmethod
    def from_result(cls, result: dict | None, default: str = "unknown error") -> "DirectoryError":
        """Build an error from an ldap3 ``Connection.result`` dict."""
        res: dict[str, Any] = dict(result or {})
        code = res.get("result")
        desc = res.get("description") or ""
        msg = res.get("message") or ""
        if msg and msg != desc:
            desc = f"{desc} ({msg})" if desc else msg
        return cls(desc or default, code if isinstance(code, int) else None)

    def __str__(self) -> str:
        if self.code is None:
            return self.description
        return f"{self.code}: {self.description}"


class DirectoryConnectionError(DirectoryError):
    """The directory server could not be reached."""


class BindError(DirectoryError):
    """Authentication with the bind account was rejected."""


class NotBoundError(BindError):
    """An operation was issued on a session that is not bound."""


class NotFound(DirectoryError):
    """The search completed but matched no entry."""


class SearchError(DirectoryError):
    pass


class AddError(DirectoryError):
    pass


class ModifyError(DirectoryError):
    pass


class RemoveError(DirectoryError):
    pass


class ValidationError(DirectoryError):
    """A mandatory field is missing; raised before any directory call."""
