"""Tests for the Checkout state machine and the totals policy."""

import pytest
from protean.exceptions import InvalidOperationError
from storefront.cart.cart import ShoppingCart
from storefront.catalogue.product import Product
from storefront.checkout.checkout import Checkout, CheckoutStatus, compute_totals
from storefront.exceptions import CheckoutRejected, EmptyCart, InsufficientInventory, ProductGone


def _product(name="Forest Deck Box", price=12.75, inventory=10):
    return Product.create(name=name, price=price, category="deck-boxes", inventory=inventory)


def _lookup(*products):
    catalogue = {str(product.id): product for product in products}
    return lambda product_id: catalogue.get(str(product_id))


class TestComputeTotals:
    def test_flat_shipping_below_threshold(self):
        assert compute_totals(25.5) == {"subtotal": 25.5, "tax": 0.0, "shipping": 9.99, "total": 35.49}

    def test_free_shipping_at_threshold(self):
        assert compute_totals(50.0) == {"subtotal": 50.0, "tax": 0.0, "shipping": 0.0, "total": 50.0}

    def test_free_shipping_above_threshold(self):
        totals = compute_totals(60.0)
        assert totals["shipping"] == 0.0
        assert totals["total"] == 60.0

    def test_just_below_threshold_pays_shipping(self):
        assert compute_totals(49.99)["total"] == 59.98


class TestBeginCheckout:
    def test_starts_idle(self):
        checkout = Checkout(ShoppingCart.create(session_id="sess-001"), _lookup())
        assert checkout.status == CheckoutStatus.IDLE

    def test_empty_cart_fails(self):
        checkout = Checkout(ShoppingCart.create(session_id="sess-001"), _lookup())
        with pytest.raises(EmptyCart):
            checkout.begin()

    def test_valid_cart_returns_totals(self):
        product = _product()
        cart = ShoppingCart.create(session_id="sess-001")
        cart.add_item(product, 2)
        checkout = Checkout(cart, _lookup(product))

        totals = checkout.begin()

        assert totals == {"subtotal": 25.5, "tax": 0.0, "shipping": 9.99, "total": 35.49}
        assert checkout.status == CheckoutStatus.VALIDATING

    def test_missing_product_rejected(self):
        product = _product()
        cart = ShoppingCart.create(session_id="sess-001")
        cart.add_item(product, 1)
        checkout = Checkout(cart, _lookup())

        with pytest.raises(CheckoutRejected) as exc:
            checkout.begin()

        assert checkout.status == CheckoutStatus.REJECTED
        [problem] = exc.value.problems
        assert isinstance(problem, ProductGone)
        assert problem.product_id == str(product.id)

    def test_insufficient_inventory_rejected(self):
        product = _product(name="Dice Tower", inventory=5)
        cart = ShoppingCart.create(session_id="sess-001")
        cart.add_item(product, 5)
        product.decrement_inventory(2)  # another session bought two
        checkout = Checkout(cart, _lookup(product))

        with pytest.raises(CheckoutRejected) as exc:
            checkout.begin()

        [problem] = exc.value.problems
        assert isinstance(problem, InsufficientInventory)
        assert problem.available == 3
        assert problem.requested == 5
        assert problem.message == "Dice Tower only has 3 items in stock, but you have 5 in your cart"

    def test_every_problem_is_reported(self):
        gone = _product(name="Gone")
        short = _product(name="Short", inventory=4)
        fine = _product(name="Fine")
        cart = ShoppingCart.create(session_id="sess-001")
        cart.add_item(gone, 1)
        cart.add_item(short, 4)
        cart.add_item(fine, 1)
        short.decrement_inventory(3)

        with pytest.raises(CheckoutRejected) as exc:
            Checkout(cart, _lookup(short, fine)).begin()

        kinds = sorted(type(problem).__name__ for problem in exc.value.problems)
        assert kinds == ["InsufficientInventory", "ProductGone"]
        assert len(exc.value.messages["items"]) == 2

    def test_begin_does_not_touch_cart_or_stock(self):
        product = _product(inventory=10)
        cart = ShoppingCart.create(session_id="sess-001")
        cart.add_item(product, 2)

        Checkout(cart, _lookup(product)).begin()

        assert cart.total_items == 2
        assert product.inventory == 10


class TestCommitGuard:
    def test_commit_before_begin_fails(self):
        product = _product()
        cart = ShoppingCart.create(session_id="sess-001")
        cart.add_item(product, 1)
        checkout = Checkout(cart, _lookup(product))

        with pytest.raises(InvalidOperationError):
            checkout.commit(customer={}, shipping_address={})

    def test_commit_after_rejection_fails(self):
        product = _product()
        cart = ShoppingCart.create(session_id="sess-001")
        cart.add_item(product, 1)
        checkout = Checkout(cart, _lookup())

        with pytest.raises(CheckoutRejected):
            checkout.begin()
        with pytest.raises(InvalidOperationError):
            checkout.commit(customer={}, shipping_address={})
