"""Password reset and generation for AD accounts.

AD stores the password in ``unicodePwd``, which must be written as the
password wrapped in double quotes and encoded as UTF-16LE:
http://msdn.microsoft.com/en-us/library/cc223248.aspx
"""
from __future__ import annotations

import logging
import secrets
import string
from typing import Optional, Union

from .user import UserEntity

log = logging.getLogger(__name__)

UPPERCASE = string.ascii_uppercase
LOWERCASE = string.ascii_lowercase
DIGITS = string.digits
SYMBOLS = "~!@#$%^&*_-|(){}[]:;<>?/"

DEFAULT_MIN_LENGTH = 8


def encode_password(password: str) -> bytes:
    """Quote the password and emit each character as ``<byte> 0x00``.

    Only characters up to U+00FF fit this form; anything above raises
    ValueError.
    """
    out = bytearray()
    for ch in f'"{password}"':
        cp = ord(ch)
        if cp > 0xFF:
            raise ValueError(f"character {ch!r} cannot be encoded for unicodePwd")
        out.append(cp)
        out.append(0)
    return bytes(out)


class PasswordManager:
    def __init__(self, user: UserEntity, min_length: int = DEFAULT_MIN_LENGTH) -> None:
        _check_length(min_length)
        self.user = user
        self.min_length = min_length

    def reset_password(self, username: str, password: Optional[str] = None) -> Union[str, bool]:
        """(Re)set a user's password.

        Without ``password`` a new one is generated, ``pwdLastSet`` is set to 0
        so the user must change it at next logon, and the generated password
        is returned for the administrator to hand over. With ``password`` the
        user chose it: pwdLastSet is left alone and True is returned.
        """
        generated = password is None
        new_password = self.generate_password() if generated else password

        mods: dict[str, object] = {"unicodePwd": encode_password(new_password)}
        if generated:
            # http://msdn.microsoft.com/en-us/library/aa746510(v=vs.85).aspx
            mods["pwdLastSet"] = "0"

        self.user.modify(username, mods)
        log.info("Password reset for %s (generated=%s)", username, generated)
        if generated:
            return new_password
        return True

    def generate_password(self, length: Optional[int] = None) -> str:
        """Random password meeting the default AD complexity rules.

        Built from 4-character blocks of uppercase, lowercase, digit, symbol.
        Every character is drawn uniformly from its whole pool.
        """
        length = self.min_length if length is None else length
        _check_length(length)
        chars: list[str] = []
        for _ in range(length // 4):
            chars.append(secrets.choice(UPPERCASE))
            chars.append(secrets.choice(LOWERCASE))
            chars.append(secrets.choice(DIGITS))
            chars.append(secrets.choice(SYMBOLS))
        return "".join(chars)


def _check_length(length: int) -> None:
    if length <= 0 or length % 4:
        raise ValueError(f"password length must be a positive multiple of 4, got {length}")
