from __future__ import annotations

import logging
from typing import Any

from ldap3.core.exceptions import LDAPException
from ldap3.utils.dn import escape_rdn

from ..ad_utils import child_dn
from .entity import DirectoryEntity
from .errors import AddError, ModifyError, ValidationError
from .models import GLOBAL_SECURITY_GROUP, GROUP_OBJECT_CLASSES, GROUPS_OU
from .utils import escape_ldap_filter_value

log = logging.getLogger(__name__)


class GroupEntity(DirectoryEntity):
    """Security groups, addressed by name (cn).

    New and renamed groups always live in OU=groups under the base DN.
    """

    @property
    def groups_dn(self) -> str:
        return child_dn(GROUPS_OU, self.base_dn)

    def search(self, group_name: str) -> str:
        """Return the DN of the first group named ``group_name``."""
        flt = f"(cn={escape_ldap_filter_value(group_name)})"
        dn, _ = self._search_first(flt)
        return dn

    def modify(self, group_name: str, new_name: str) -> bool:
        """Rename a group; the old RDN is deleted."""
        dn = self.search(group_name)
        new_rdn = f"CN={escape_rdn(new_name)}"
        with self.directory.request() as conn:
            try:
                ok = bool(conn.modify_dn(dn, new_rdn, delete_old_dn=True, new_superior=self.groups_dn))
            except LDAPException as e:
                log.error("Rename %s failed: %s", dn, e)
                raise ModifyError(str(e)) from e
            res = dict(conn.result or {})
        if not ok:
            err = ModifyError.from_result(res, "rename failed")
            log.warning("Rename %s -> %s rejected: %s", dn, new_rdn, err)
            raise err
        log.info("Group renamed: %s -> %s", dn, child_dn(new_rdn, self.groups_dn))
        return True

    def add(self, group_data: dict) -> bool:
        """Create a global security group.

        group_data keys: groupname (required), groupdesc (optional).
        Group types: http://msdn.microsoft.com/en-us/library/ms675935(v=vs.85).aspx
        """
        name = str((group_data or {}).get("groupname") or "").strip()
        if not name:
            raise ValidationError("groupname is required")
        desc = group_data.get("groupdesc")

        dn = child_dn(f"CN={escape_rdn(name)}", self.groups_dn)
        attrs: dict[str, Any] = {
            "objectClass": list(GROUP_OBJECT_CLASSES),
            "cn": name,
            "sAMAccountName": name,
            "groupType": str(GLOBAL_SECURITY_GROUP),
        }
        if desc:
            attrs["description"] = desc

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
        log.info("Group created: %s", dn)
        return True

    def remove(self, group_name: str) -> bool:
        dn = self.search(group_name)
        return self._delete(dn)
