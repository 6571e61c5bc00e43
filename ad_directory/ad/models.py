from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Union

from ldap3.utils.ciDict import CaseInsensitiveDict

# Attribute name -> single value or list of values. Names are case-insensitive.
AttributeMap = CaseInsensitiveDict
AttributeValue = Union[str, bytes, int, List[Any], None]

USER_OBJECT_CLASSES = ["top", "person", "organizationalPerson", "user"]
GROUP_OBJECT_CLASSES = ["top", "group"]

GROUPS_OU = "OU=groups"

# Multi-valued in the AD schema; returned as lists even with a single value.
MULTI_VALUED_ATTRIBUTES = frozenset(
    name.lower()
    for name in (
        "member",
        "memberOf",
        "objectClass",
        "otherTelephone",
        "otherMobile",
        "otherPager",
        "otherIpPhone",
        "otherHomePhone",
        "otherMailbox",
        "proxyAddresses",
        "servicePrincipalName",
        "url",
    )
)

# userAccountControl
UAC_ACCOUNTDISABLE = 0x0002
UAC_NORMAL_ACCOUNT = 0x0200
UAC_ENABLED = UAC_NORMAL_ACCOUNT  # 512
UAC_DISABLED = UAC_NORMAL_ACCOUNT | UAC_ACCOUNTDISABLE  # 514

# groupType
GROUP_SCOPE_GLOBAL = 0x00000002
GROUP_SECURITY_ENABLED = 0x80000000
GLOBAL_SECURITY_GROUP = GROUP_SCOPE_GLOBAL | GROUP_SECURITY_ENABLED  # 2147483650


def attribute_map(data: dict | None = None) -> CaseInsensitiveDict:
    m = CaseInsensitiveDict()
    for k, v in (data or {}).items():
        m[k] = v
    return m


@dataclass
class UserRecord:
    """DN of a matched user plus the requested attributes.

    Attributes the entry lacks are ``None``. Attributes listed in
    ``MULTI_VALUED_ATTRIBUTES`` are always lists; for any other attribute a
    single value is unwrapped and several values stay a list.
    """

    dn: str
    attributes: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)

    @classmethod
    def from_entry(cls, dn: str, raw: dict, requested: Iterable[str]) -> "UserRecord":
        found = attribute_map(raw)
        attrs = CaseInsensitiveDict()
        for name in requested:
            values = found.get(name)
            if values is None or values == []:
                attrs[name] = None
            elif name.lower() in MULTI_VALUED_ATTRIBUTES:
                attrs[name] = list(values) if isinstance(values, (list, tuple)) else [values]
            elif isinstance(values, (list, tuple)):
                attrs[name] = values[0] if len(values) == 1 else list(values)
            else:
                attrs[name] = values
        return cls(dn=dn, attributes=attrs)

    def __getitem__(self, name: str) -> AttributeValue:
        if name.lower() == "dn":
            return self.dn
        return self.attributes[name]

    def __contains__(self, name: str) -> bool:
        return name.lower() == "dn" or name in self.attributes

    def get(self, name: str, default: Any = None) -> AttributeValue:
        try:
            v = self[name]
        except KeyError:
            return default
        return default if v is None else v

    def values(self, name: str) -> list:
        """Always a list, empty when the attribute is absent."""
        v = self.attributes.get(name)
        if v is None:
            return []
        if isinstance(v, list):
            return v
        return [v]
