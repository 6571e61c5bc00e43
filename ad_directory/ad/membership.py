from __future__ import annotations

import logging

from ldap3 import MODIFY_ADD, MODIFY_DELETE
from ldap3.core.exceptions import LDAPException

from .errors import ModifyError
from .group import GroupEntity
from .user import UserEntity

log = logging.getLogger(__name__)


class MembershipManager:
    """Group membership of users.

    Membership is written on the group's ``member`` attribute; AD maintains
    the user's ``memberOf`` back-link, which is only read here.
    """

    def __init__(self, user: UserEntity, group: GroupEntity) -> None:
        self.user = user
        self.group = group

    def add_user_to_group(self, username: str, group_name: str) -> bool:
        """Add the user's DN to the group. Existing membership is not checked."""
        return self._change_member(username, group_name, MODIFY_ADD)

    def remove_user_from_group(self, username: str, group_name: str) -> bool:
        return self._change_member(username, group_name, MODIFY_DELETE)

    def user_in_group(self, username: str, group_name: str) -> bool:
        group_dn = self.group.search(group_name)
        member_of = self.groups_of(username)
        wanted = group_dn.lower()
        return any(dn.lower() == wanted for dn in member_of)

    def groups_of(self, username: str) -> list[str]:
        """DNs of the groups the user is a member of."""
        rec = self.user.search(username, ["memberOf"])
        return [str(dn) for dn in rec.values("memberOf")]

    def _change_member(self, username: str, group_name: str, operation: str) -> bool:
        user_dn = self.user.search(username).dn
        group_dn = self.group.search(group_name)
        action = "add" if operation == MODIFY_ADD else "remove"

        with self.user.directory.request() as conn:
            try:
                ok = bool(conn.modify(group_dn, {"member": [(operation, [user_dn])]}))
            except LDAPException as e:
                log.error("Member %s %s on %s failed: %s", action, user_dn, group_dn, e)
                raise ModifyError(str(e)) from e
            res = dict(conn.result or {})
        if not ok:
            err = ModifyError.from_result(res, f"member {action} failed")
            log.warning("Member %s %s on %s rejected: %s", action, user_dn, group_dn, err)
            raise err
        log.info("Member %s: %s on %s", action, user_dn, group_dn)
        return True
