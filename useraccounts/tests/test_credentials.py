from __future__ import annotations

from datetime import date

import pytest

from useraccounts.domain.exceptions import InvariantViolation
from useraccounts.domain.users.credentials import derive_hash, generate_salt, hashes_match
from useraccounts.domain.users.entities import User, UserRole, upper_first
from useraccounts.tests.fakes import make_user


@pytest.mark.parametrize("password", ["s3cret-pass", "", "päss wörd", "x" * 128])
def test_set_password_then_validate(password: str) -> None:
    user = make_user(password=None)
    user.set_password(password)

    assert user.validate_password(password)
    assert not user.validate_password(password + "!")


def test_set_password_uses_fresh_salt_each_time() -> None:
    user = make_user(password=None)
    user.set_password("same-password")
    first_salt, first_hash = user.salt, user.password_hash
    user.set_password("same-password")

    assert user.salt != first_salt
    assert user.password_hash != first_hash
    assert user.validate_password("same-password")


def test_hash_parameters() -> None:
    salt = generate_salt()

    assert len(salt) == 32
    digest = derive_hash("password", salt)
    # 512-byte key, hex encoded
    assert len(digest) == 1024
    assert digest == derive_hash("password", salt)
    assert hashes_match(digest, derive_hash("password", salt))
    assert not hashes_match(digest, derive_hash("password", generate_salt()))


def test_user_without_credentials_never_validates() -> None:
    user = make_user(password=None)

    assert not user.validate_password("")
    assert not user.validate_password("anything")


def test_salt_and_hash_must_be_set_together() -> None:
    with pytest.raises(InvariantViolation):
        User(
            email="a@x.com",
            first_name="A",
            last_name="B",
            dob=date(2000, 1, 1),
            salt="abc",
        )


def test_role_defaults_to_user_and_accepts_strings() -> None:
    assert make_user().user_role is UserRole.USER
    assert make_user(user_role="Admin").user_role is UserRole.ADMIN


def test_projection_hides_credentials() -> None:
    user = make_user()
    projection = user.projection()

    assert "salt" not in projection
    assert "password_hash" not in projection
    assert projection["dob"] == "1990-05-17"
    assert projection["user_role"] == "User"
    assert set(projection) == {
        "id",
        "email",
        "first_name",
        "last_name",
        "dob",
        "user_role",
        "created_at",
        "updated_at",
        "version",
    }


def test_apply_changes_upper_firsts_names_and_rejects_other_fields() -> None:
    user = make_user()
    user.apply_changes({"first_name": "alice", "dob": date(1991, 2, 3)})

    assert user.first_name == "Alice"
    assert user.dob == date(1991, 2, 3)
    with pytest.raises(InvariantViolation):
        user.apply_changes({"user_role": "Admin"})


def test_upper_first() -> None:
    assert upper_first("jane") == "Jane"
    assert upper_first("mcDonald") == "McDonald"
    assert upper_first("") == ""
