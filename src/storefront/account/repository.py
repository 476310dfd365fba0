"""Repositories for customer accounts and session sign-ins."""

from protean.exceptions import ObjectNotFoundError

from storefront.account.account import CustomerAccount, SessionSignIn, normalise_email
from storefront.domain import storefront


@storefront.repository(part_of=CustomerAccount)
class CustomerAccountRepository:
    def find_by_email(self, email: str) -> CustomerAccount | None:
        return self._dao.query.filter(email=normalise_email(email)).all().first

    def find_by_reset_token(self, token_hash: str) -> CustomerAccount | None:
        return self._dao.query.filter(reset_token_hash=token_hash).all().first


@storefront.repository(part_of=SessionSignIn)
class SessionSignInRepository:
    def for_session(self, session_id: str) -> SessionSignIn:
        try:
            return self.get(session_id)
        except ObjectNotFoundError:
            return SessionSignIn(session_id=session_id)
