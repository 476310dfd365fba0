"""Tests for the CustomerAccount aggregate."""

from datetime import UTC, datetime, timedelta

import pytest
from protean.exceptions import ValidationError
from storefront.account.account import CustomerAccount, SessionSignIn, hash_password, hash_reset_token
from storefront.account.events import AccountRegistered


def _account(email="Ada@Example.com ", password="spellbook"):
    return CustomerAccount.register(name=" Ada Lovelace ", email=email, password_hash=hash_password(password))


class TestRegistration:
    def test_register_normalises_name_and_email(self):
        account = _account()

        assert account.name == "Ada Lovelace"
        assert account.email == "ada@example.com"
        assert account.is_active is True
        assert account.created_at is not None

    def test_register_raises_event_without_the_password(self):
        account = _account()

        [event] = account._events
        assert isinstance(event, AccountRegistered)
        assert event.email == "ada@example.com"
        assert "password_hash" not in event.to_dict()

    def test_invalid_email_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _account(email="not-an-email")
        assert "email" in exc.value.messages

    def test_short_name_rejected(self):
        with pytest.raises(ValidationError) as exc:
            CustomerAccount.register(name="A", email="a@example.com", password_hash=hash_password("spellbook"))
        assert "name" in exc.value.messages


class TestPasswords:
    def test_hash_is_not_the_password(self):
        hashed = hash_password("spellbook")
        assert "spellbook" not in hashed
        assert hashed.startswith("$2")

    def test_check_password(self):
        account = _account(password="spellbook")

        assert account.check_password("spellbook") is True
        assert account.check_password("Spellbook") is False
        assert account.check_password("") is False

    def test_short_password_rejected(self):
        with pytest.raises(ValidationError) as exc:
            hash_password("d20")
        assert exc.value.messages["password"] == ["Password must be at least 6 characters long"]

    def test_password_longer_than_bcrypt_accepts_is_rejected(self):
        with pytest.raises(ValidationError):
            hash_password("x" * 73)


class TestDetails:
    def test_update_details(self):
        account = _account()

        account.update_details(name="Ada King", email=" ADA.KING@example.com")

        assert account.name == "Ada King"
        assert account.email == "ada.king@example.com"

    def test_record_sign_in(self):
        account = _account()
        account.record_sign_in()
        assert account.last_login_at is not None


class TestPasswordReset:
    def test_reset_with_issued_token(self):
        account = _account(password="spellbook")
        token = account.start_password_reset()

        account.reset_password(hash_reset_token(token), hash_password("new-spellbook"))

        assert account.check_password("new-spellbook") is True
        assert account.check_password("spellbook") is False
        assert account.reset_token_hash is None

    def test_only_the_token_hash_is_kept(self):
        account = _account()
        token = account.start_password_reset()
        assert account.reset_token_hash == hash_reset_token(token)
        assert account.reset_token_hash != token

    def test_wrong_token_rejected(self):
        account = _account()
        account.start_password_reset()

        with pytest.raises(ValidationError) as exc:
            account.reset_password(hash_reset_token("guess"), hash_password("new-spellbook"))
        assert exc.value.messages["token"] == ["Invalid or expired reset token"]

    def test_expired_token_rejected(self):
        account = _account()
        token = account.start_password_reset()
        account.reset_expires_at = datetime.now(UTC) - timedelta(seconds=1)

        with pytest.raises(ValidationError):
            account.reset_password(hash_reset_token(token), hash_password("new-spellbook"))

    def test_token_works_once(self):
        account = _account()
        token = account.start_password_reset()
        account.reset_password(hash_reset_token(token), hash_password("new-spellbook"))

        with pytest.raises(ValidationError):
            account.reset_password(hash_reset_token(token), hash_password("other-spellbook"))


class TestSessionSignIn:
    def test_sign_out_clears_the_account(self):
        sign_in = SessionSignIn(session_id="sess-001", account_id="acct-001", signed_in_at=datetime.now(UTC))

        sign_in.sign_out()

        assert sign_in.account_id is None
