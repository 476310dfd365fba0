"""Session identity for the web boundary.

A shopper is identified by an HTTP-only cookie. The first request without
one gets a fresh session id. Every response refreshes the cookie so the
session expires ``session_max_age`` seconds after the last visit.

Signing in binds the session to a customer account. Checkout requires it.
"""

from uuid import uuid4

from fastapi import Depends, Request, Response

from storefront.account.access import signed_in_account
from storefront.account.account import CustomerAccount
from storefront.config import settings
from storefront.exceptions import AuthenticationRequired

_MAX_SESSION_ID_LENGTH = 64


def get_session_id(request: Request, response: Response) -> str:
    session_id = request.cookies.get(settings.session_cookie_name)
    if not session_id or len(session_id) > _MAX_SESSION_ID_LENGTH:
        session_id = str(uuid4())

    response.set_cookie(
        key=settings.session_cookie_name,
        value=session_id,
        max_age=settings.session_max_age,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
    return session_id


def get_signed_in_account(session_id: str = Depends(get_session_id)) -> CustomerAccount:
    """The account this session is signed in to.

    Raises:
        AuthenticationRequired: the session is anonymous.
    """
    account = signed_in_account(session_id)
    if account is None:
        raise AuthenticationRequired()
    return account
