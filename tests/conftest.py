"""Shared pytest fixtures and configuration for all tests."""

import os

# Must be set before src.main is imported so no application is built at import
os.environ.setdefault("ENVIRONMENT", "test")

import pytest  # noqa: E402

from restaurant_order_service.models.menu_models import MenuCatalog  # noqa: E402
from restaurant_order_service.repositories.order_book import OrderBook  # noqa: E402
from restaurant_order_service.repositories.table_registry import TableRegistry  # noqa: E402
from restaurant_order_service.services.order_workflow import OrderWorkflow  # noqa: E402
from restaurant_order_service.services.transaction_ids import (  # noqa: E402
    SequentialTransactionIdGenerator,
)


@pytest.fixture
def table_registry() -> TableRegistry:
    """Fixture providing four tables of capacity four."""
    return TableRegistry(table_count=4, capacity=4)


@pytest.fixture
def order_book() -> OrderBook:
    """Fixture providing an empty order book."""
    return OrderBook()


@pytest.fixture
def menu() -> MenuCatalog:
    """Fixture providing the default menu."""
    return MenuCatalog()


@pytest.fixture
def workflow(
    table_registry: TableRegistry, order_book: OrderBook, menu: MenuCatalog
) -> OrderWorkflow:
    """Fixture providing a workflow with sequential transaction ids and no receipt sink."""
    return OrderWorkflow(
        table_registry=table_registry,
        order_book=order_book,
        menu=menu,
        transaction_ids=SequentialTransactionIdGenerator(start=1000),
    )


@pytest.fixture
def staff_api_key() -> str:
    """Fixture providing a standard staff API key."""
    return "test-staff-key"
