import pytest
from ldap3 import MODIFY_REPLACE

from ad_directory.ad.errors import ModifyError, NotFound
from ad_directory.ad.password import (
    DIGITS,
    LOWERCASE,
    SYMBOLS,
    UPPERCASE,
    PasswordManager,
    encode_password,
)

from conftest import make_entry, queue_searches, reject

JDOE_DN = "CN=John Doe,DC=example,DC=com"


@pytest.fixture
def passwords(users):
    return PasswordManager(users)


class TestEncodePassword:
    def test_single_character(self):
        assert encode_password("x") == b'"\x00x\x00"\x00'

    def test_quotes_and_zero_bytes(self):
        assert encode_password("Ab1") == b'"\x00A\x00b\x001\x00"\x00'

    def test_matches_utf16le_for_latin1(self):
        assert encode_password("Pässw0rd!") == '"Pässw0rd!"'.encode("utf-16-le")

    def test_rejects_characters_outside_one_byte(self):
        with pytest.raises(ValueError):
            encode_password("pass€")


class TestGeneratePassword:
    def test_default_length(self, passwords):
        assert len(passwords.generate_password()) == 8

    def test_block_shape(self, passwords):
        pw = passwords.generate_password(16)

        assert len(pw) == 16
        for i in range(0, 16, 4):
            upper, lower, digit, symbol = pw[i:i + 4]
            assert upper in UPPERCASE
            assert lower in LOWERCASE
            assert digit in DIGITS
            assert symbol in SYMBOLS

    def test_later_blocks_use_whole_pool(self, passwords):
        seen = set()
        for _ in range(300):
            seen.add(passwords.generate_password(12)[8])

        # with the full 26-letter pool, "A" shows up in 300 draws
        assert "A" in seen

    @pytest.mark.parametrize("length", [0, 6, 10, -4])
    def test_length_must_be_multiple_of_four(self, passwords, length):
        with pytest.raises(ValueError):
            passwords.generate_password(length)

    def test_min_length_validated_on_construction(self, users):
        with pytest.raises(ValueError):
            PasswordManager(users, min_length=7)

    def test_configured_min_length(self, users):
        assert len(PasswordManager(users, min_length=12).generate_password()) == 12


class TestResetPassword:
    def test_generated_password_forces_change_at_logon(self, passwords, ldap_conn):
        queue_searches(ldap_conn, [make_entry(JDOE_DN)])

        new_pw = passwords.reset_password("jdoe")

        assert isinstance(new_pw, str)
        assert len(new_pw) == 8
        ldap_conn.modify.assert_called_once_with(JDOE_DN, {
            "unicodePwd": [(MODIFY_REPLACE, [encode_password(new_pw)])],
            "pwdLastSet": [(MODIFY_REPLACE, ["0"])],
        })

    def test_user_chosen_password_returns_true_only(self, passwords, ldap_conn):
        queue_searches(ldap_conn, [make_entry(JDOE_DN)])

        assert passwords.reset_password("jdoe", "Secret1") is True

        ldap_conn.modify.assert_called_once_with(JDOE_DN, {
            "unicodePwd": [(MODIFY_REPLACE, [encode_password("Secret1")])],
        })

    def test_unknown_user(self, passwords, ldap_conn):
        queue_searches(ldap_conn, [])

        with pytest.raises(NotFound):
            passwords.reset_password("nobody")

    def test_rejected_by_password_policy(self, passwords, ldap_conn):
        queue_searches(ldap_conn, [make_entry(JDOE_DN)])
        reject(ldap_conn.modify, ldap_conn, 19, "constraintViolation")

        with pytest.raises(ModifyError) as exc:
            passwords.reset_password("jdoe", "short")

        assert exc.value.code == 19
