"""Active Directory (LDAP) entity access.

Public API:
    - DirectoryConnection
    - UserEntity, GroupEntity
    - PasswordManager, MembershipManager
    - UserRecord and the DirectoryError hierarchy
"""

from .connection import DirectoryConnection
from .entity import DirectoryEntity
from .errors import (
    AddError,
    BindError,
    DirectoryConnectionError,
    DirectoryError,
    ModifyError,
    NotBoundError,
    NotFound,
    RemoveError,
    SearchError,
    ValidationError,
)
from .group import GroupEntity
from .membership import MembershipManager
from .models import AttributeMap, UserRecord
from .password import PasswordManager, encode_password
from .user import UserEntity

__all__ = [
    "DirectoryConnection",
    "DirectoryEntity",
    "UserEntity",
    "GroupEntity",
    "PasswordManager",
    "MembershipManager",
    "AttributeMap",
    "UserRecord",
    "encode_password",
    "DirectoryError",
    "DirectoryConnectionError",
    "BindError",
    "NotBoundError",
    "NotFound",
    "SearchError",
    "AddError",
    "ModifyError",
    "RemoveError",
    "ValidationError",
]
