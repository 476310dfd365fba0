"""Domain events for customer accounts."""

from protean.fields import DateTime, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="CustomerAccount")
class AccountRegistered:
    """A shopper signed up for a customer account."""

    __version__ = 1

    account_id: Identifier(required=True)
    name: String(required=True)
    email: String(required=True)
    registered_at: DateTime(required=True)


@storefront.event(part_of="CustomerAccount")
class AccountSignedIn:
    __version__ = 1

    account_id: Identifier(required=True)
    signed_in_at: DateTime(required=True)


@storefront.event(part_of="CustomerAccount")
class AccountDetailsUpdated:
    __version__ = 1

    account_id: Identifier(required=True)
    name: String(required=True)
    email: String(required=True)


@storefront.event(part_of="CustomerAccount")
class PasswordResetRequested:
    __version__ = 1

    account_id: Identifier(required=True)
    expires_at: DateTime(required=True)


@storefront.event(part_of="CustomerAccount")
class PasswordChanged:
    __version__ = 1

    account_id: Identifier(required=True)
    changed_at: DateTime(required=True)
