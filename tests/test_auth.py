from datetime import datetime, timedelta, timezone

import pytest

from bookstore.auth import (
    authenticate,
    create_access_token,
    login,
    require_role,
    verify_password,
)
from bookstore.errors import (
    ForbiddenError,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
    ValidationError,
)
from bookstore.models import Identity

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD, EDITOR_EMAIL, TEST_SECRET


CLAIMS = {"id": 1, "email": ADMIN_EMAIL, "role": "admin", "name": "Store Admin"}


def test_login_returns_token_with_identity(store, settings):
    user, token = login(store, ADMIN_EMAIL, ADMIN_PASSWORD, settings)
    assert user == {"id": 1, "email": ADMIN_EMAIL, "name": "Store Admin", "role": "admin"}
    identity = authenticate(f"Bearer {token}", TEST_SECRET)
    assert identity.email == ADMIN_EMAIL
    assert identity.role == "admin"
    assert identity.exp is not None


def test_token_expires_eight_hours_after_issue(store, settings):
    _, token = login(store, ADMIN_EMAIL, ADMIN_PASSWORD, settings)
    identity = authenticate(f"Bearer {token}", TEST_SECRET)
    expected = datetime.now(timezone.utc) + timedelta(hours=8)
    assert abs(identity.exp - expected) < timedelta(minutes=1)


def test_login_requires_email_and_password(store, settings):
    with pytest.raises(ValidationError):
        login(store, "", None, settings)


def test_login_unknown_email(store, settings):
    with pytest.raises(InvalidCredentialsError):
        login(store, "wrong@email.com", "wrongpassword", settings)


def test_login_non_admin_is_treated_as_unknown(store, settings):
    with pytest.raises(InvalidCredentialsError) as info:
        login(store, EDITOR_EMAIL, ADMIN_PASSWORD, settings)
    assert info.value.message == "Access restricted to administrators"


def test_login_wrong_password(store, settings):
    with pytest.raises(InvalidCredentialsError) as info:
        login(store, ADMIN_EMAIL, "nope", settings)
    assert info.value.message == "Incorrect password"


@pytest.mark.parametrize("header", [None, "", "Bearer", "Bearer   ", "Token abc", "abc"])
def test_missing_or_malformed_header(header):
    with pytest.raises(MissingTokenError):
        authenticate(header, TEST_SECRET)


def test_wrong_secret_is_invalid():
    token = create_access_token(CLAIMS, "another-secret")
    with pytest.raises(InvalidTokenError):
        authenticate(f"Bearer {token}", TEST_SECRET)


def test_expired_token_is_invalid():
    token = create_access_token(CLAIMS, TEST_SECRET, expires_delta=timedelta(seconds=-5))
    with pytest.raises(InvalidTokenError):
        authenticate(f"Bearer {token}", TEST_SECRET)


def test_tampered_token_is_invalid():
    header, _, signature = create_access_token(CLAIMS, TEST_SECRET).split(".")
    _, payload, _ = create_access_token({**CLAIMS, "role": "owner"}, TEST_SECRET).split(".")
    with pytest.raises(InvalidTokenError):
        authenticate(f"Bearer {header}.{payload}.{signature}", TEST_SECRET)


def test_require_role_rejects_other_roles():
    require_role(Identity(**CLAIMS))
    with pytest.raises(ForbiddenError):
        require_role(Identity(id=2, email=EDITOR_EMAIL, role="editor"))


def test_verify_password_rejects_garbage_hash():
    assert verify_password("secret", "not-a-hash") is False
    assert verify_password("secret", "") is False
