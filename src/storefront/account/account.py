"""Customer accounts and the sessions signed in to them.

Checkout requires a signed-in account. A browser session is bound to an
account by a ``SessionSignIn`` keyed by the session id, so the cart that was
built before signing in stays with the shopper.

Passwords and reset tokens never reach a command or an event: callers hash
them first with ``hash_password`` and ``hash_reset_token``.
"""

import hashlib
import secrets
from datetime import UTC, datetime, timedelta

import bcrypt
from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, String

from storefront.account.events import (
    AccountDetailsUpdated,
    AccountRegistered,
    AccountSignedIn,
    PasswordChanged,
    PasswordResetRequested,
)
from storefront.config import settings
from storefront.domain import storefront

MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_BYTES = 72  # bcrypt ignores anything longer


def normalise_email(email: str) -> str:
    return (email or "").strip().lower()


def hash_password(password: str) -> str:
    """Validate a new password and return its bcrypt hash."""
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            {"password": [f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"]}
        )
    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise ValidationError({"password": [f"Password must be at most {MAX_PASSWORD_BYTES} bytes long"]})
    return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=settings.password_hash_rounds)).decode("ascii")


def hash_reset_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


@storefront.aggregate
class CustomerAccount:
    """A registered shopper."""

    name: String(required=True, max_length=100)
    email: String(required=True, max_length=254)
    password_hash: String(required=True, max_length=100)
    is_active: Boolean(default=True)
    reset_token_hash: String(max_length=64)
    reset_expires_at: DateTime()
    created_at: DateTime()
    last_login_at: DateTime()

    @invariant.post
    def name_must_not_be_blank(self):
        if len((self.name or "").strip()) < 2:
            raise ValidationError({"name": ["Name must be at least 2 characters long"]})

    @invariant.post
    def email_must_have_a_domain(self):
        local_part, _, domain_part = (self.email or "").partition("@")
        if not local_part or "." not in domain_part or "@" in domain_part:
            raise ValidationError({"email": ["Please enter a valid email address"]})

    @classmethod
    def register(cls, name, email, password_hash):
        now = datetime.now(UTC)
        account = cls(
            name=(name or "").strip(),
            email=normalise_email(email),
            password_hash=password_hash,
            is_active=True,
            created_at=now,
        )
        account.raise_(
            AccountRegistered(
                account_id=account.id,
                name=account.name,
                email=account.email,
                registered_at=now,
            )
        )
        return account

    def check_password(self, password: str) -> bool:
        encoded = (password or "").encode("utf-8")
        if not encoded or len(encoded) > MAX_PASSWORD_BYTES:
            return False
        return bcrypt.checkpw(encoded, self.password_hash.encode("ascii"))

    def record_sign_in(self):
        self.last_login_at = datetime.now(UTC)
        self.raise_(AccountSignedIn(account_id=self.id, signed_in_at=self.last_login_at))

    def update_details(self, name, email):
        self.name = (name or "").strip()
        self.email = normalise_email(email)
        self.raise_(AccountDetailsUpdated(account_id=self.id, name=self.name, email=self.email))

    def start_password_reset(self) -> str:
        """Issue a reset token valid for ``settings.password_reset_ttl`` seconds.

        Only the token's hash is kept. The plain token is returned so it can be
        delivered to the shopper.
        """
        token = secrets.token_urlsafe(32)
        self.reset_token_hash = hash_reset_token(token)
        self.reset_expires_at = datetime.now(UTC) + timedelta(seconds=settings.password_reset_ttl)
        self.raise_(PasswordResetRequested(account_id=self.id, expires_at=self.reset_expires_at))
        return token

    def reset_password(self, token_hash: str, password_hash: str):
        now = datetime.now(UTC)
        expires_at = self.reset_expires_at
        if expires_at is not None and expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=UTC)
        if (
            not self.reset_token_hash
            or not secrets.compare_digest(self.reset_token_hash, token_hash)
            or expires_at is None
            or expires_at <= now
        ):
            raise ValidationError({"token": ["Invalid or expired reset token"]})

        self.password_hash = password_hash
        self.reset_token_hash = None
        self.reset_expires_at = None
        self.raise_(PasswordChanged(account_id=self.id, changed_at=now))


@storefront.aggregate
class SessionSignIn:
    """Which account, if any, a browser session is signed in to."""

    session_id: Identifier(identifier=True)
    account_id: Identifier()
    signed_in_at: DateTime()

    def sign_out(self):
        self.account_id = None
        self.signed_in_at = None
