"""Storefront load test scenarios.

ShopperJourney walks the happy path: browse, add to cart, review, check out
and view the confirmation. LastUnitRush sends many sessions after the same
low-stock product, which exercises checkout serialization and the daily
order counter under contention. Steps execute in order.

Checkout needs a signed-in session, so every simulated shopper signs up and
logs in first.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import cart_quantity, checkout_data, signup_data
from loadtests.helpers.state import ShopperState


def sign_up_and_log_in(client) -> bool:
    """Create an account and bind the client's session to it."""
    account = signup_data()
    signup = client.post("/auth/signup", json=account, name="POST /auth/signup")
    if signup.status_code != 201:
        return False
    login = client.post(
        "/auth/login",
        json={"email": account["email"], "password": account["password"]},
        name="POST /auth/login",
    )
    return login.status_code == 200


class ShopperJourney(SequentialTaskSet):
    """Browse -> Add to Cart -> Review -> Checkout -> Confirmation."""

    def on_start(self):
        self.state = ShopperState()
        self.state.signed_in = sign_up_and_log_in(self.client)

    @task
    def browse_products(self):
        with self.client.get("/products", catch_response=True, name="GET /products") as resp:
            if resp.status_code != 200:
                resp.failure(f"List products failed: {resp.status_code}")
                self.interrupt()
            self.state.product_ids = [p["id"] for p in resp.json()["products"] if p["in_stock"]]
            if not self.state.product_ids:
                resp.failure("Nothing in stock")
                self.interrupt()

    @task
    def view_product(self):
        product_id = random.choice(self.state.product_ids)
        self.client.get(f"/products/{product_id}", name="GET /products/{id}")

    @task
    def add_to_cart(self):
        product_id = random.choice(self.state.product_ids)
        with self.client.post(
            "/cart/add",
            json={"id": product_id, "quantity": cart_quantity()},
            catch_response=True,
            name="POST /cart/add",
        ) as resp:
            if resp.status_code == 200:
                self.state.cart_items = resp.json()["cart"]["total_items"]
            elif resp.status_code == 400:
                # Not enough stock left for this session
                resp.success()
            else:
                resp.failure(f"Add to cart failed: {resp.status_code}")

    @task
    def review_checkout(self):
        if not self.state.cart_items or not self.state.signed_in:
            self.interrupt()
        with self.client.get("/checkout", catch_response=True, name="GET /checkout") as resp:
            if resp.status_code == 409:
                resp.success()
                self.interrupt()

    @task
    def place_order(self):
        if not self.state.signed_in:
            self.interrupt()
        with self.client.post(
            "/checkout",
            json=checkout_data(),
            catch_response=True,
            name="POST /checkout",
        ) as resp:
            if resp.status_code == 201:
                body = resp.json()
                self.state.order_id = body["order_id"]
                self.state.order_number = body["order_number"]
            elif resp.status_code == 409:
                # Someone else bought the stock first
                resp.success()
                self.interrupt()
            else:
                resp.failure(f"Checkout failed: {resp.status_code}")
                self.interrupt()

    @task
    def view_confirmation(self):
        self.client.get(
            f"/checkout/confirmation/{self.state.order_id}",
            name="GET /checkout/confirmation/{id}",
        )
        self.interrupt()


class LastUnitRush(SequentialTaskSet):
    """Every session grabs the scarcest product and tries to check out."""

    def on_start(self):
        self.state = ShopperState()
        self.state.signed_in = sign_up_and_log_in(self.client)

    @task
    def find_scarcest_product(self):
        resp = self.client.get("/products", name="GET /products")
        in_stock = [p for p in resp.json()["products"] if p["in_stock"]]
        if not in_stock:
            self.interrupt()
        scarcest = min(in_stock, key=lambda p: p["inventory"])
        self.state.product_ids = [scarcest["id"]]

    @task
    def add_last_units(self):
        with self.client.post(
            "/cart/add",
            json={"id": self.state.product_ids[0], "quantity": 1},
            catch_response=True,
            name="POST /cart/add",
        ) as resp:
            if resp.status_code == 400:
                resp.success()
                self.interrupt()

    @task
    def checkout(self):
        if not self.state.signed_in:
            self.interrupt()
        with self.client.post(
            "/checkout",
            json=checkout_data(),
            catch_response=True,
            name="POST /checkout",
        ) as resp:
            if resp.status_code in (201, 409):
                resp.success()
            else:
                resp.failure(f"Checkout failed: {resp.status_code}")
        self.interrupt()


class ShopperUser(HttpUser):
    tasks = [ShopperJourney]
    wait_time = between(1, 3)


class LastUnitRushUser(HttpUser):
    tasks = [LastUnitRush]
    wait_time = between(0.1, 0.5)
