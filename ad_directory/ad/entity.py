from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from ldap3 import SUBTREE
from ldap3.core.exceptions import LDAPException

from .connection import DirectoryConnection
from .errors import NotFound, RemoveError, SearchError

log = logging.getLogger(__name__)


class DirectoryEntity(ABC):
    """Common contract of the user and group objects.

    The identifier is the sAMAccountName for users and the group name (cn)
    for groups. Entities hold a ``DirectoryConnection``; they never cache DNs,
    every call resolves the entry again.
    """

    def __init__(self, directory: DirectoryConnection) -> None:
        self.directory = directory

    @property
    def base_dn(self) -> str:
        return self.directory.base_dn

    @abstractmethod
    def search(self, identifier: str, *args: Any) -> Any:
        ...

    @abstractmethod
    def modify(self, identifier: str, changes: Any) -> bool:
        ...

    @abstractmethod
    def add(self, data: dict) -> bool:
        ...

    @abstractmethod
    def remove(self, identifier: str) -> bool:
        ...

    def _search_first(self, flt: str, attributes: list[str] | None = None) -> tuple[str, dict]:
        """Return (dn, attributes) of the first entry matching ``flt`` under the base DN.

        Raises SearchError when the server rejects or cannot run the search,
        NotFound when it runs and matches nothing.
        """
        base = self.base_dn
        log.debug("Search base=%s filter=%s attrs=%s", base, flt, attributes)
        with self.directory.request() as conn:
            try:
                ok = conn.search(
                    search_base=base,
                    search_filter=flt,
                    search_scope=SUBTREE,
                    attributes=attributes or [],
                )
            except LDAPException as e:
                log.error("Search %s failed: %s", flt, e)
                raise SearchError(str(e)) from e
            res = dict(conn.result or {})
            entries = list(conn.entries) if ok else []

        # ldap3 returns False both for "no entries" and for a rejected request
        if not entries:
            code = res.get("result", 0)
            if code not in (0, None):
                err = SearchError.from_result(res, "search failed")
                log.warning("Search %s rejected: %s", flt, err)
                raise err
            raise NotFound(f"no entry matches {flt}")

        e = entries[0]
        return str(e.entry_dn), dict(e.entry_attributes_as_dict)

    def _delete(self, dn: str) -> bool:
        with self.directory.request() as conn:
            try:
                ok = bool(conn.delete(dn))
            except LDAPException as e:
                log.error("Delete %s failed: %s", dn, e)
                raise RemoveError(str(e)) from e
            res = dict(conn.result or {})
        if not ok:
            err = RemoveError.from_result(res, "delete failed")
            log.warning("Delete %s rejected: %s", dn, err)
            raise err
        log.info("Deleted %s", dn)
        return True
