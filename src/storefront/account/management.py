"""Customer account commands and handler."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.account.account import CustomerAccount, SessionSignIn
from storefront.domain import storefront

logger = structlog.get_logger(__name__)


@storefront.command(part_of="CustomerAccount")
class RegisterAccount:
    name: String(required=True, max_length=100)
    email: String(required=True, max_length=254)
    password_hash: String(required=True, max_length=100)


@storefront.command(part_of="CustomerAccount")
class SignIn:
    """Bind a session to an account whose credentials were already checked."""

    session_id: Identifier(required=True)
    account_id: Identifier(required=True)


@storefront.command(part_of="CustomerAccount")
class SignOut:
    session_id: Identifier(required=True)


@storefront.command(part_of="CustomerAccount")
class UpdateAccountDetails:
    account_id: Identifier(required=True)
    name: String(required=True, max_length=100)
    email: String(required=True, max_length=254)


@storefront.command(part_of="CustomerAccount")
class RequestPasswordReset:
    email: String(required=True, max_length=254)


@storefront.command(part_of="CustomerAccount")
class ResetPassword:
    token_hash: String(required=True, max_length=64)
    password_hash: String(required=True, max_length=100)


@storefront.command_handler(part_of=CustomerAccount)
class ManageAccountHandler:
    @handle(RegisterAccount)
    def register_account(self, command):
        repo = current_domain.repository_for(CustomerAccount)
        if repo.find_by_email(command.email) is not None:
            raise ValidationError({"email": ["An account with this email already exists"]})

        account = CustomerAccount.register(
            name=command.name,
            email=command.email,
            password_hash=command.password_hash,
        )
        repo.add(account)

        logger.info("Account registered", account_id=str(account.id))
        return str(account.id)

    @handle(SignIn)
    def sign_in(self, command):
        accounts = current_domain.repository_for(CustomerAccount)
        account = accounts.get(command.account_id)
        account.record_sign_in()
        accounts.add(account)

        sign_ins = current_domain.repository_for(SessionSignIn)
        sign_in = sign_ins.for_session(command.session_id)
        sign_in.account_id = account.id
        sign_in.signed_in_at = account.last_login_at
        sign_ins.add(sign_in)

        logger.info("Account signed in", account_id=str(account.id))
        return str(account.id)

    @handle(SignOut)
    def sign_out(self, command):
        sign_ins = current_domain.repository_for(SessionSignIn)
        sign_in = sign_ins.for_session(command.session_id)
        account_id = sign_in.account_id
        sign_in.sign_out()
        sign_ins.add(sign_in)

        if account_id:
            logger.info("Account signed out", account_id=str(account_id))

    @handle(UpdateAccountDetails)
    def update_account_details(self, command):
        repo = current_domain.repository_for(CustomerAccount)
        account = repo.get(command.account_id)

        holder = repo.find_by_email(command.email)
        if holder is not None and holder.id != account.id:
            raise ValidationError({"email": ["This email is already in use by another account"]})

        account.update_details(name=command.name, email=command.email)
        repo.add(account)

        logger.info("Account details updated", account_id=str(account.id))
        return str(account.id)

    @handle(RequestPasswordReset)
    def request_password_reset(self, command):
        repo = current_domain.repository_for(CustomerAccount)
        account = repo.find_by_email(command.email)
        if account is None or not account.is_active:
            return None

        token = account.start_password_reset()
        repo.add(account)

        logger.info("Password reset requested", account_id=str(account.id))
        return token

    @handle(ResetPassword)
    def reset_password(self, command):
        repo = current_domain.repository_for(CustomerAccount)
        account = repo.find_by_reset_token(command.token_hash)
        if account is None or not account.is_active:
            raise ValidationError({"token": ["Invalid or expired reset token"]})

        account.reset_password(command.token_hash, command.password_hash)
        repo.add(account)

        logger.info("Password reset completed", account_id=str(account.id))
        return str(account.id)
