from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from ad_directory.ad.connection import DirectoryConnection
from ad_directory.ad.group import GroupEntity
from ad_directory.ad.user import UserEntity
from ad_directory.env_settings import DirectoryConfig

BASE_DN = "DC=example,DC=com"
BIND_DN = "CN=svc-ad,CN=Users,DC=example,DC=com"

SUCCESS = {"result": 0, "description": "success", "message": ""}


def make_entry(dn, **attrs):
    """Stand-in for an ldap3 Entry: values are lists, as ldap3 returns them."""
    values = {k: (v if isinstance(v, list) else [v]) for k, v in attrs.items()}
    return SimpleNamespace(entry_dn=dn, entry_attributes_as_dict=values)


def queue_searches(ldap_conn, *results):
    """Each search call consumes the next list of entries."""
    pending = list(results)

    def _search(**kwargs):
        entries = pending.pop(0)
        ldap_conn.entries = entries
        ldap_conn.result = dict(SUCCESS)
        return bool(entries)

    ldap_conn.search.side_effect = _search


def reject(operation, ldap_conn, code, description, message=""):
    """Make ``operation`` (e.g. ldap_conn.modify) fail with the given server result.

    The result is set when the call happens, after any preceding search.
    """
    def _rejected(*args, **kwargs):
        ldap_conn.result = {"result": code, "description": description, "message": message}
        return False

    operation.side_effect = _rejected


@pytest.fixture
def config():
    return DirectoryConfig(
        host="dc01.example.com",
        port=389,
        bind_user=BIND_DN,
        bind_password="secret",
        base_dn=BASE_DN,
    )


@pytest.fixture
def ldap_conn():
    """MagicMock in place of ldap3.Connection, answering every request with success."""
    conn = MagicMock(name="ldap3.Connection")
    conn.bind.return_value = True
    conn.search.return_value = False
    conn.add.return_value = True
    conn.modify.return_value = True
    conn.delete.return_value = True
    conn.modify_dn.return_value = True
    conn.entries = []
    conn.result = dict(SUCCESS)
    return conn


@pytest.fixture
def connection_cls(ldap_conn):
    with patch("ad_directory.ad.connection.Connection", return_value=ldap_conn) as cls:
        yield cls


@pytest.fixture
def directory(config, connection_cls):
    d = DirectoryConnection(config, server=MagicMock(name="ldap3.Server"))
    yield d
    d.close()


@pytest.fixture
def users(directory):
    return UserEntity(directory)


@pytest.fixture
def groups(directory):
    return GroupEntity(directory)
