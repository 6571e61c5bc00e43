from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Iterator

from ldap3 import Server, Connection, NONE, SYNC
from ldap3.core.exceptions import LDAPException

from ..env_settings import DirectoryConfig
from .errors import BindError, DirectoryConnectionError, DirectoryError, NotBoundError

log = logging.getLogger(__name__)


class DirectoryConnection:
    """The one connection and bound session shared by the entity classes.

    Construction connects and then binds; a failed connect raises
    ``DirectoryConnectionError`` without attempting the bind, and a failed
    bind unbinds the opened connection before raising.

    Requests go through ``request()``, which holds a lock for the duration of
    the call so two threads never interleave operations on the session.
    Writes are not isolated from each other: the last ``modify`` wins.
    """

    def __init__(
        self,
        cfg: DirectoryConfig,
        *,
        server: Server | None = None,
        client_strategy: str = SYNC,
    ) -> None:
        self.cfg = cfg
        self._client_strategy = client_strategy
        self._lock = threading.RLock()
        self._conn: Connection | None = None
        self.last_result: dict[str, Any] = {}
        self.bound = False

        self.server = server or Server(
            host=cfg.host,
            port=cfg.port,
            use_ssl=cfg.use_ssl,
            get_info=NONE,
            connect_timeout=cfg.connect_timeout,
        )

        self.connect()
        try:
            self.bind()
        except DirectoryError:
            self.close()
            raise

    @property
    def base_dn(self) -> str:
        return self.cfg.base_dn

    @property
    def session(self) -> Connection:
        if self._conn is None or not self.bound:
            raise NotBoundError("session is not bound")
        return self._conn

    @property
    def last_error(self) -> tuple[int | None, str]:
        res = self.last_result or {}
        return res.get("result"), str(res.get("description") or "")

    def connect(self) -> Connection:
        """Open the transport (LDAP v3). Does not authenticate."""
        log.debug("Connecting to %s:%s", self.cfg.host, self.cfg.port)
        conn = Connection(
            self.server,
            user=self.cfg.bind_user or None,
            password=self.cfg.bind_password or None,
            version=3,
            client_strategy=self._client_strategy,
            auto_bind=False,
            receive_timeout=self.cfg.receive_timeout,
        )
        try:
            conn.open()
        except LDAPException as e:
            log.error("Cannot reach directory server %s:%s: %s", self.cfg.host, self.cfg.port, e)
            raise DirectoryConnectionError(str(e)) from e
        self._conn = conn
        self.bound = False
        return conn

    def bind(self) -> bool:
        """Authenticate the open connection with the configured account."""
        if self._conn is None:
            raise DirectoryConnectionError("no open connection to bind")
        with self._lock:
            try:
                ok = bool(self._conn.bind())
            except LDAPException as e:
                self.last_result = {"result": None, "description": str(e)}
                self.bound = False
                log.error("Bind as %s failed: %s", self.cfg.bind_user, e)
                raise BindError(str(e)) from e
            self.last_result = dict(self._conn.result or {})
            self.bound = ok
        if not ok:
            err = BindError.from_result(self.last_result, "bind rejected")
            log.error("Bind as %s failed: %s", self.cfg.bind_user, err)
            raise err
        log.info("Bound to %s:%s as %s", self.cfg.host, self.cfg.port, self.cfg.bind_user)
        return True

    def rebind(self) -> bool:
        self.close()
        self.connect()
        return self.bind()

    @contextmanager
    def request(self) -> Iterator[Connection]:
        """Yield the bound session while holding the session lock."""
        with self._lock:
            conn = self.session
            try:
                yield conn
            finally:
                self.last_result = dict(conn.result or {})

    def close(self) -> None:
        with self._lock:
            conn, self._conn = self._conn, None
            self.bound = False
            if conn is None:
                return
            try:
                conn.unbind()
            except LDAPException as e:
                log.warning("Unbind failed: %s", e)

    def __enter__(self) -> "DirectoryConnection":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
