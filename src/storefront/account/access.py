"""Entry points for signing up, signing in and recovering accounts.

These take plain passwords and tokens from the web boundary, check or hash
them, and hand only hashes on to the account commands.
"""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.account.account import CustomerAccount, SessionSignIn, hash_password, hash_reset_token
from storefront.account.management import (
    RegisterAccount,
    RequestPasswordReset,
    ResetPassword,
    SignIn,
    SignOut,
)
from storefront.exceptions import InvalidCredentials

logger = structlog.get_logger(__name__)


def register_account(name: str, email: str, password: str) -> str:
    """Create an account and return its id."""
    command = RegisterAccount(name=name, email=email, password_hash=hash_password(password))
    return current_domain.process(command, asynchronous=False)


def sign_in(session_id: str, email: str, password: str) -> CustomerAccount:
    """Check the credentials and bind the session to the account.

    Raises:
        InvalidCredentials: unknown email, wrong password or inactive account.
    """
    account = current_domain.repository_for(CustomerAccount).find_by_email(email)
    if account is None or not account.is_active or not account.check_password(password):
        logger.info("Sign in refused")
        raise InvalidCredentials()

    current_domain.process(SignIn(session_id=session_id, account_id=account.id), asynchronous=False)
    return current_domain.repository_for(CustomerAccount).get(account.id)


def sign_out(session_id: str) -> None:
    current_domain.process(SignOut(session_id=session_id), asynchronous=False)


def signed_in_account(session_id: str) -> CustomerAccount | None:
    """The active account the session is signed in to, if any."""
    sign_in_record = current_domain.repository_for(SessionSignIn).for_session(session_id)
    if not sign_in_record.account_id:
        return None

    try:
        account = current_domain.repository_for(CustomerAccount).get(sign_in_record.account_id)
    except ObjectNotFoundError:
        return None
    return account if account.is_active else None


def request_password_reset(email: str) -> str | None:
    """Issue a reset token for the account behind ``email``.

    Returns ``None`` when there is no such active account. Callers must not
    reveal the difference to the shopper.
    """
    return current_domain.process(RequestPasswordReset(email=email), asynchronous=False)


def reset_password(token: str, password: str) -> str:
    command = ResetPassword(token_hash=hash_reset_token(token), password_hash=hash_password(password))
    return current_domain.process(command, asynchronous=False)
