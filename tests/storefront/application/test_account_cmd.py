"""Application tests for customer accounts: sign up, sign in and recovery."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from storefront.account import access
from storefront.account.account import CustomerAccount, SessionSignIn
from storefront.account.management import UpdateAccountDetails
from storefront.exceptions import InvalidCredentials


def _register(email="ada@example.com", password="spellbook", name="Ada Lovelace"):
    return access.register_account(name, email, password)


class TestRegisterAccount:
    def test_register_persists_account(self):
        account_id = _register(email="Ada@Example.com")

        account = current_domain.repository_for(CustomerAccount).get(account_id)
        assert account.email == "ada@example.com"
        assert account.check_password("spellbook")

    def test_duplicate_email_rejected_regardless_of_case(self):
        _register(email="ada@example.com")

        with pytest.raises(ValidationError) as exc:
            _register(email="ADA@example.com")

        assert exc.value.messages["email"] == ["An account with this email already exists"]

    def test_short_password_rejected_before_anything_is_stored(self):
        with pytest.raises(ValidationError):
            _register(password="d20")

        assert current_domain.repository_for(CustomerAccount)._dao.query.all().total == 0


class TestSignIn:
    def test_sign_in_binds_session(self):
        account_id = _register()

        account = access.sign_in("sess-001", "ADA@example.com", "spellbook")

        assert account.id == account_id
        assert account.last_login_at is not None
        assert access.signed_in_account("sess-001").id == account_id
        assert access.signed_in_account("sess-002") is None

    @pytest.mark.parametrize("email,password", [("ada@example.com", "wrong-pass"), ("nobody@example.com", "spellbook")])
    def test_bad_credentials(self, email, password):
        _register()

        with pytest.raises(InvalidCredentials) as exc:
            access.sign_in("sess-001", email, password)

        assert exc.value.messages == {"credentials": ["Invalid email or password"]}
        assert access.signed_in_account("sess-001") is None

    def test_inactive_account_cannot_sign_in(self):
        account_id = _register()
        repo = current_domain.repository_for(CustomerAccount)
        account = repo.get(account_id)
        account.is_active = False
        repo.add(account)

        with pytest.raises(InvalidCredentials):
            access.sign_in("sess-001", "ada@example.com", "spellbook")

    def test_sign_out(self):
        _register()
        access.sign_in("sess-001", "ada@example.com", "spellbook")

        access.sign_out("sess-001")

        assert access.signed_in_account("sess-001") is None
        assert current_domain.repository_for(SessionSignIn).get("sess-001").account_id is None

    def test_sign_out_of_anonymous_session(self):
        access.sign_out("sess-001")
        assert access.signed_in_account("sess-001") is None


class TestUpdateAccountDetails:
    def test_update(self):
        account_id = _register()

        current_domain.process(
            UpdateAccountDetails(account_id=account_id, name="Ada King", email="ada.king@example.com"),
            asynchronous=False,
        )

        account = current_domain.repository_for(CustomerAccount).get(account_id)
        assert account.name == "Ada King"
        assert account.email == "ada.king@example.com"

    def test_keeping_own_email_is_allowed(self):
        account_id = _register()

        current_domain.process(
            UpdateAccountDetails(account_id=account_id, name="Ada King", email="ada@example.com"),
            asynchronous=False,
        )

        assert current_domain.repository_for(CustomerAccount).get(account_id).name == "Ada King"

    def test_email_of_another_account_rejected(self):
        account_id = _register(email="ada@example.com")
        _register(email="charles@example.com", name="Charles Babbage")

        with pytest.raises(ValidationError) as exc:
            current_domain.process(
                UpdateAccountDetails(account_id=account_id, name="Ada", email="charles@example.com"),
                asynchronous=False,
            )

        assert exc.value.messages["email"] == ["This email is already in use by another account"]


class TestPasswordRecovery:
    def test_reset_flow(self):
        _register()

        token = access.request_password_reset("ada@example.com")
        access.reset_password(token, "new-spellbook")

        with pytest.raises(InvalidCredentials):
            access.sign_in("sess-001", "ada@example.com", "spellbook")
        assert access.sign_in("sess-001", "ada@example.com", "new-spellbook").email == "ada@example.com"

    def test_unknown_email_gets_no_token(self):
        assert access.request_password_reset("nobody@example.com") is None

    def test_unknown_token_rejected(self):
        _register()

        with pytest.raises(ValidationError) as exc:
            access.reset_password("not-a-token", "new-spellbook")

        assert exc.value.messages["token"] == ["Invalid or expired reset token"]
