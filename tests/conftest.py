"""Shared pytest fixtures for pricing tests."""

import pytest

from pos_pricing import BEVERAGES, CANDY, SNACKS, Customer, Product, Sale


@pytest.fixture
def sale() -> Sale:
    """Fresh, empty sale session."""
    return Sale()


@pytest.fixture
def cola() -> Product:
    return Product(id="prod-001", name="Coca-Cola 600ml", price=12.0, category=BEVERAGES)


@pytest.fixture
def alfajor() -> Product:
    return Product(id="prod-003", name="Alfajor Triple", price=9.5, category=CANDY)


@pytest.fixture
def chips() -> Product:
    return Product(id="prod-004", name="Papas Fritas 80g", price=16.0, category=SNACKS)


@pytest.fixture
def loyal_customer() -> Customer:
    return Customer(id="cust-1", name="Alice", loyalty_points=150)


@pytest.fixture
def new_customer() -> Customer:
    return Customer(id="cust-2", name="Bob", loyalty_points=20)
