"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the checkout request validation
(name length, email, phone and ZIP patterns) and match the field names of
the API's Pydantic request schemas.
"""

import random
from uuid import uuid4

from faker import Faker

fake = Faker("en_US")


def valid_phone() -> str:
    """Generate phones matching ^\\+?[1-9]\\d{0,15}$ (no separators)."""
    return f"{random.randint(2, 9)}{random.randint(0, 10**9 - 1):09d}"


def customer_data() -> dict:
    return {
        "name": fake.name()[:100],
        "email": fake.email(),
        "phone": valid_phone(),
    }


def shipping_address_data() -> dict:
    return {
        "street": fake.street_address()[:255],
        "city": fake.city()[:100],
        "state": fake.state_abbr(),
        "zip_code": fake.zipcode(),
        "country": "United States",
    }


def checkout_data() -> dict:
    data = {
        "customer": customer_data(),
        "shipping_address": shipping_address_data(),
    }
    if random.random() < 0.3:
        data["notes"] = fake.sentence(nb_words=8)
    return data


def cart_quantity() -> int:
    """Mostly single items, occasionally a handful."""
    return random.choices([1, 2, 3, 5], weights=[60, 25, 10, 5])[0]


def signup_data() -> dict:
    """A fresh account per simulated shopper; emails must be unique."""
    password = fake.password(length=12)
    return {
        "name": fake.name()[:100],
        "email": f"{uuid4().hex[:12]}@{fake.free_email_domain()}",
        "password": password,
        "confirm_password": password,
    }
