"""Application tests for cart commands: session carts persisted through the repository."""

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from storefront.cart.cart import ShoppingCart
from storefront.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartItem
from storefront.exceptions import ItemNotFound


def _add(session_id, product_id, quantity=1):
    return current_domain.process(
        AddToCart(session_id=session_id, product_id=product_id, quantity=quantity),
        asynchronous=False,
    )


class TestAddToCartCommand:
    def test_first_add_creates_session_cart(self, make_product):
        product = make_product()

        summary = _add("sess-001", product.id, 2)

        cart = current_domain.repository_for(ShoppingCart).get("sess-001")
        assert cart.total_items == 2
        assert cart.reservations == {str(product.id): 2}
        assert summary["total_items"] == 2
        assert summary["items"][0]["name"] == product.name

    def test_carts_are_isolated_per_session(self, make_product):
        product = make_product(inventory=10)
        _add("sess-001", product.id, 3)
        _add("sess-002", product.id, 4)

        repo = current_domain.repository_for(ShoppingCart)
        assert repo.get("sess-001").total_items == 3
        assert repo.get("sess-002").total_items == 4

    def test_unknown_product_not_found(self):
        with pytest.raises(ObjectNotFoundError):
            _add("sess-001", "no-such-product")

    def test_cannot_reserve_more_than_stock(self, make_product):
        product = make_product(name="Dragon Dice Tower", inventory=3)
        _add("sess-001", product.id, 2)

        with pytest.raises(ValidationError) as exc:
            _add("sess-001", product.id, 2)

        assert "Only 1 more of Dragon Dice Tower" in exc.value.messages["quantity"][0]
        cart = current_domain.repository_for(ShoppingCart).get("sess-001")
        assert cart.total_items == 2

    def test_out_of_stock_product_cannot_be_added(self, make_product):
        product = make_product(inventory=0)
        with pytest.raises(ValidationError):
            _add("sess-001", product.id)

    def test_zero_quantity_rejected_by_command(self, make_product):
        product = make_product()
        with pytest.raises(ValidationError):
            AddToCart(session_id="sess-001", product_id=product.id, quantity=0)


class TestUpdateCartItemCommand:
    def test_update_persists(self, make_product):
        product = make_product()
        _add("sess-001", product.id, 1)

        current_domain.process(
            UpdateCartItem(session_id="sess-001", product_id=product.id, quantity=5),
            asynchronous=False,
        )

        cart = current_domain.repository_for(ShoppingCart).get("sess-001")
        assert cart.items[0].quantity == 5
        assert cart.reservations[str(product.id)] == 5

    def test_update_to_zero_removes(self, make_product):
        product = make_product()
        _add("sess-001", product.id, 2)

        summary = current_domain.process(
            UpdateCartItem(session_id="sess-001", product_id=product.id, quantity=0),
            asynchronous=False,
        )

        assert summary["is_empty"] is True
        assert current_domain.repository_for(ShoppingCart).get("sess-001").reservations == {}

    def test_update_missing_item(self):
        with pytest.raises(ItemNotFound):
            current_domain.process(
                UpdateCartItem(session_id="sess-001", product_id="no-such-product", quantity=2),
                asynchronous=False,
            )


class TestRemoveAndClearCommands:
    def test_remove_persists(self, make_product):
        first, second = make_product(name="A"), make_product(name="B")
        _add("sess-001", first.id)
        _add("sess-001", second.id)

        current_domain.process(RemoveFromCart(session_id="sess-001", product_id=first.id), asynchronous=False)

        cart = current_domain.repository_for(ShoppingCart).get("sess-001")
        assert [item.name for item in cart.items] == ["B"]

    def test_remove_missing_item(self, make_product):
        _add("sess-001", make_product().id)
        with pytest.raises(ItemNotFound):
            current_domain.process(
                RemoveFromCart(session_id="sess-001", product_id="no-such-product"),
                asynchronous=False,
            )
        assert current_domain.repository_for(ShoppingCart).get("sess-001").total_items == 1

    def test_clear_persists(self, make_product):
        _add("sess-001", make_product().id, 2)

        current_domain.process(ClearCart(session_id="sess-001"), asynchronous=False)

        cart = current_domain.repository_for(ShoppingCart).get("sess-001")
        assert cart.is_empty
        assert cart.total_price == 0.0
