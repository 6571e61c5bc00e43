from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from ldap3 import MODIFY_REPLACE
from ldap3.core.exceptions import LDAPException
from ldap3.utils.dn import escape_rdn

from ..ad_utils import child_dn
from .entity import DirectoryEntity
from .errors import AddError, ModifyError, NotFound, ValidationError
from .models import (
    USER_OBJECT_CLASSES,
    UAC_DISABLED,
    UAC_ENABLED,
    UserRecord,
    attribute_map,
)
from .utils import escape_ldap_filter_value, filetime_to_unix

log = logging.getLogger(__name__)

DEFAULT_USER_ATTRIBUTES = ("sAMAccountName",)

# Set by add() itself, caller values are ignored.
_DERIVED_ATTRIBUTES = ("objectclass", "displayname", "useraccountcontrol")


class UserEntity(DirectoryEntity):
    """User accounts, addressed by sAMAccountName.

    Attribute names follow the AD schema:
    http://msdn.microsoft.com/en-us/library/ms675090(v=vs.85).aspx
    """

    def search(
        self,
        username: str,
        attributes: Optional[Iterable[str]] = None,
    ) -> UserRecord:
        """Find a user and return its DN plus the requested attributes.

        Missing attributes come back as None. Schema multi-valued attributes
        (memberOf, otherPager, proxyAddresses, ...) are always lists; other
        attributes are unwrapped to a scalar when they hold one value. Raises
        NotFound when no entry matches and SearchError when the search itself
        fails.
        """
        attrs = list(attributes) if attributes else list(DEFAULT_USER_ATTRIBUTES)
        flt = f"(sAMAccountName={escape_ldap_filter_value(username)})"
        dn, raw = self._search_first(flt, attrs)
        return UserRecord.from_entry(dn, raw, attrs)

    def exists(self, username: str) -> bool:
        try:
            self.search(username)
        except NotFound:
            return False
        return True

    def modify(self, username: str, changes: dict) -> bool:
        """Replace the given attributes on the user's entry in one request."""
        dn = self.search(username).dn
        mods: dict[str, list[tuple[Any, list]]] = {}
        for attr, value in changes.items():
            values = value if isinstance(value, (list, tuple)) else [value]
            mods[attr] = [(MODIFY_REPLACE, list(values))]

        # values may include unicodePwd; log names only
        log.debug("Modify %s: %s", dn, sorted(mods))
        with self.directory.request() as conn:
            try:
                ok = bool(conn.modify(dn, mods))
            except LDAPException as e:
                log.error("Modify %s failed: %s", dn, e)
                raise ModifyError(str(e)) from e
            res = dict(conn.result or {})
        if not ok:
            err = ModifyError.from_result(res, "modify failed")
            log.warning("Modify %s rejected: %s", dn, err)
            raise err
        log.info("Modified %s (%s)", dn, ", ".join(sorted(mods)))
        return True

    def add(self, user_data: dict) -> bool:
        """Create a user.

        Required: sAMAccountName. With givenName and sn the common name is
        "<givenName> <sn>", otherwise the account name. An optional userId is
        appended to the sn part of the common name so that two people with
        the same name get different RDNs (e.g. "John Doe 00012"); userId is
        not an AD attribute and is not stored. Everything else is passed
        through as attributes.
        """
        entry = attribute_map(user_data)
        if not str(entry.get("sAMAccountName") or "").strip():
            raise ValidationError("sAMAccountName is required")

        user_id = entry.get("userId")
        if "userId" in entry:
            del entry["userId"]

        given = str(entry.get("givenName") or "").strip()
        sn = str(entry.get("sn") or "").strip()
        if given and sn:
            if user_id is not None and str(user_id).strip():
                sn = f"{sn} {str(user_id).strip()}"
            cn = f"{given} {sn}"
        else:
            cn = str(entry["sAMAccountName"]).strip()

        dn = child_dn(f"CN={escape_rdn(cn)}", self.base_dn)

        attrs: dict[str, Any] = {"objectClass": list(USER_OBJECT_CLASSES)}
        for k, v in entry.items():
            if k.lower() in _DERIVED_ATTRIBUTES:
                continue
            attrs[k] = v
        attrs["displayName"] = cn
        attrs["userAccountControl"] = str(UAC_ENABLED)

        log.debug("Add user %s", dn)
        with self.directory.request() as conn:
            try:
                ok = bool(conn.add(dn, attributes=attrs))
            except LDAPException as e:
                log.error("Add %s failed: %s", dn, e)
                raise AddError(str(e)) from e
            res = dict(conn.result or {})
        if not ok:
            err = AddError.from_result(res, "add failed")
            log.warning("Add %s rejected: %s", dn, err)
            raise err
        log.info("User created: %s", dn)
        return True

    def remove(self, username: str) -> bool:
        dn = self.search(username).dn
        return self._delete(dn)

    def toggle_account(self, username: str, enable: bool) -> bool:
        """Enable (512) or disable (514) an account."""
        uac = UAC_ENABLED if enable else UAC_DISABLED
        return self.modify(username, {"userAccountControl": str(uac)})

    def last_logon(self, username: str) -> float | None:
        """Unix time of the replicated last logon, None if never logged on."""
        rec = self.search(username, ["lastLogonTimestamp"])
        return filetime_to_unix(rec["lastLogonTimestamp"])
