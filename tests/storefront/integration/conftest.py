import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from storefront.api import account_router, cart_router, checkout_router, product_router, register_error_handlers
from storefront.domain import storefront


def _build_app():
    app = FastAPI()

    @app.middleware("http")
    async def domain_context(request: Request, call_next):
        with storefront.domain_context():
            return await call_next(request)

    app.include_router(product_router)
    app.include_router(cart_router)
    app.include_router(checkout_router)
    app.include_router(account_router)
    register_error_handlers(app)
    return app


@pytest.fixture()
def client():
    return TestClient(_build_app())


@pytest.fixture()
def other_client():
    return TestClient(_build_app())


@pytest.fixture()
def sign_up_and_in():
    """Register an account and sign the client's session in to it."""

    def _sign_in(client, email="ada@example.com", password="spellbook", name="Ada Lovelace"):
        signup = client.post(
            "/auth/signup",
            json={"name": name, "email": email, "password": password, "confirm_password": password},
        )
        assert signup.status_code == 201, signup.text
        login = client.post("/auth/login", json={"email": email, "password": password})
        assert login.status_code == 200, login.text
        return login.json()["account"]

    return _sign_in
