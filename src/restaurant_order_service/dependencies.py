"""Shared dependency factory for the HTTP and terminal front ends.

Configuration is read from the environment here and nowhere else; the
workflow and its containers only receive plain constructor arguments.
The workflow is cached so every request in a process sees the same tables.
"""

import logging
import os

from restaurant_order_service.adapters.receipt_sink import TextFileReceiptSink
from restaurant_order_service.models.menu_models import MenuCatalog
from restaurant_order_service.models.order_models import DEFAULT_TABLE_CAPACITY
from restaurant_order_service.repositories.order_book import OrderBook
from restaurant_order_service.repositories.table_registry import (
    DEFAULT_TABLE_COUNT,
    TableRegistry,
)
from restaurant_order_service.services.order_workflow import OrderWorkflow
from restaurant_order_service.services.transaction_ids import RandomTransactionIdGenerator

logger = logging.getLogger(__name__)

DEVELOPMENT_API_KEY = "dummy-key-for-development"

# Module-level cache, one workflow per process
_order_workflow: OrderWorkflow | None = None


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default

    try:
        value = int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e

    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def create_order_workflow() -> OrderWorkflow:
    """Create a new order workflow configured from environment variables.

    Returns:
        OrderWorkflow with fresh tables, an empty order book and a file receipt sink

    Raises:
        ValueError: If TABLE_COUNT or TABLE_CAPACITY is not a positive integer
    """
    table_count = _int_from_env("TABLE_COUNT", DEFAULT_TABLE_COUNT)
    capacity = _int_from_env("TABLE_CAPACITY", DEFAULT_TABLE_CAPACITY)
    receipt_dir = os.getenv("RECEIPT_DIR", "receipts")

    workflow = OrderWorkflow(
        table_registry=TableRegistry(table_count=table_count, capacity=capacity),
        order_book=OrderBook(),
        menu=MenuCatalog(),
        transaction_ids=RandomTransactionIdGenerator(),
        receipt_sink=TextFileReceiptSink(receipt_dir),
    )

    logger.info(
        f"Order workflow configured - tables: {table_count}, capacity: {capacity}, "
        f"receipts: {receipt_dir}"
    )
    return workflow


def get_order_workflow() -> OrderWorkflow:
    """Create or retrieve the cached order workflow.

    Returns:
        The process-wide OrderWorkflow instance
    """
    global _order_workflow

    if _order_workflow is None:
        _order_workflow = create_order_workflow()

    return _order_workflow


def get_api_keys() -> list[str]:
    """Read staff API keys from STAFF_API_KEY (comma-separated).

    Returns:
        Configured keys, or a development key when none are configured
    """
    api_keys_str = os.getenv("STAFF_API_KEY", "")
    api_keys = [key.strip() for key in api_keys_str.split(",") if key.strip()]

    if not api_keys:
        logger.warning("No STAFF_API_KEY configured - using development key")
        api_keys = [DEVELOPMENT_API_KEY]

    return api_keys
