"""
Tests for activation, password reset, password change and account updates.
"""
from datetime import datetime, timedelta, timezone

import pytest

from medcare.auth.exceptions import (
    ActivationKeyNotFoundError, ResetKeyNotFoundError, ResetKeyExpiredError,
    EmailNotFoundError, InvalidCredentialError, EmailAlreadyUsedError,
    AccountNotFoundError, AuthenticationFailedError, AccountNotActivatedError
)
from medcare.auth.service import (
    activate_registration, request_password_reset, complete_password_reset,
    change_password, update_account, authenticate, find_by_login
)
from medcare.config import settings
from medcare.core.security import verify_password, verify_token


@pytest.fixture
def pending(register, monkeypatch):
    """Register accounts that wait for key-based activation."""
    monkeypatch.setattr(settings, "auto_activate_on_register", False)
    return register


def test_activate_with_key_activates_account(pending, db):
    user = pending("alice")
    key = user.activation_key

    activated = activate_registration(db, key)

    assert activated.id == user.id
    assert activated.activated is True
    assert activated.activation_key is None


def test_activation_email_carries_the_key(pending, notifier):
    user = pending("alice")
    assert notifier.sent == [("activation", "alice", user.activation_key)]


def test_repeated_activation_with_old_key_fails(pending, db):
    key = pending("alice").activation_key
    activate_registration(db, key)
    with pytest.raises(ActivationKeyNotFoundError):
        activate_registration(db, key)


def test_unknown_activation_key_fails(db):
    with pytest.raises(ActivationKeyNotFoundError):
        activate_registration(db, "does-not-exist")


def test_pending_account_cannot_authenticate(pending, db):
    pending("alice")
    with pytest.raises(AccountNotActivatedError):
        authenticate(db, "alice", "secret-pass")


def test_password_reset_round_trip(register, db):
    user = register("alice")
    old_hash = user.password_hash

    key = request_password_reset(db, "alice@example.com")
    assert find_by_login(db, "alice").reset_key == key

    reset = complete_password_reset(db, "brand-new-pass", key)

    assert reset.password_hash != old_hash
    assert verify_password("brand-new-pass", reset.password_hash)
    assert reset.reset_key is None
    with pytest.raises(ResetKeyNotFoundError):
        complete_password_reset(db, "another-pass", key)


def test_reset_request_matches_email_case_insensitively(register, db):
    register("alice", email="alice@example.com")
    assert request_password_reset(db, "ALICE@EXAMPLE.COM")


def test_reset_request_dispatches_email_when_notifier_given(register, db, notifier):
    register("alice")
    key = request_password_reset(db, "alice@example.com", notifier)
    assert notifier.sent[-1] == ("reset", "alice", key)


def test_reset_request_for_unknown_email_fails(db):
    with pytest.raises(EmailNotFoundError):
        request_password_reset(db, "nobody@example.com")


def test_reset_request_for_inactive_account_fails(pending, db):
    pending("alice")
    with pytest.raises(EmailNotFoundError):
        request_password_reset(db, "alice@example.com")


def test_new_reset_request_replaces_previous_key(register, db):
    register("alice")
    first = request_password_reset(db, "alice@example.com")
    second = request_password_reset(db, "alice@example.com")
    assert first != second
    with pytest.raises(ResetKeyNotFoundError):
        complete_password_reset(db, "brand-new-pass", first)


def test_expired_reset_key_fails(register, db):
    register("alice")
    key = request_password_reset(db, "alice@example.com")
    user = find_by_login(db, "alice")
    user.reset_date = datetime.now(timezone.utc) - timedelta(hours=settings.reset_key_validity_hours + 1)
    db.commit()

    with pytest.raises(ResetKeyExpiredError):
        complete_password_reset(db, "brand-new-pass", key)


@pytest.mark.parametrize("password", ["", None, "abc", "x" * 101])
def test_reset_completion_checks_password_length_first(register, db, password):
    register("alice")
    key = request_password_reset(db, "alice@example.com")
    with pytest.raises(InvalidCredentialError):
        complete_password_reset(db, password, key)
    assert find_by_login(db, "alice").reset_key == key


def test_change_password(register, db):
    register("alice", password="old-password")
    change_password(db, "alice", "old-password", "new-password")
    assert verify_password("new-password", find_by_login(db, "alice").password_hash)


def test_change_password_rejects_wrong_current_password(register, db):
    register("alice", password="old-password")
    with pytest.raises(InvalidCredentialError):
        change_password(db, "alice", "not-my-password", "new-password")
    assert verify_password("old-password", find_by_login(db, "alice").password_hash)


def test_change_password_checks_new_password_length(register, db):
    register("alice", password="old-password")
    with pytest.raises(InvalidCredentialError):
        change_password(db, "alice", "old-password", "abc")


def test_update_account(register, db):
    register("alice")
    user = update_account(db, "alice", "Alice.New@example.com", first_name="Alice", last_name="Liddell")
    assert user.email == "alice.new@example.com"
    assert user.first_name == "Alice"
    assert user.last_name == "Liddell"


def test_update_account_may_keep_own_email(register, db):
    register("alice")
    assert update_account(db, "alice", "ALICE@example.com").email == "alice@example.com"


def test_update_account_rejects_email_of_another_account(register, db):
    register("alice")
    register("bob")
    with pytest.raises(EmailAlreadyUsedError):
        update_account(db, "alice", "bob@example.com")


def test_update_account_for_unknown_login_fails(db):
    with pytest.raises(AccountNotFoundError):
        update_account(db, "ghost", "ghost@example.com")


def test_authenticate_issues_token_for_login(register, db):
    register("alice", role="ROLE_DOCTOR")
    payload = verify_token(authenticate(db, "ALICE", "secret-pass"))
    assert payload["sub"] == "alice"
    assert payload["auth"] == ["ROLE_DOCTOR"]


def test_authenticate_rejects_wrong_password(register, db):
    register("alice")
    with pytest.raises(AuthenticationFailedError):
        authenticate(db, "alice", "wrong-pass")
