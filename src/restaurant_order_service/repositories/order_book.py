"""In-memory repository for table orders.

Holds at most one order per table. Orders are kept after payment so status
reports can still show them until the restaurant closes.
"""

import logging
from collections.abc import Iterable

from restaurant_order_service.errors import (
    AlreadyCompleted,
    AlreadyPaid,
    NoSuchOrder,
    NotCompleted,
)
from restaurant_order_service.models.menu_models import MenuItem
from restaurant_order_service.models.order_models import Order, OrderStatus

logger = logging.getLogger(__name__)


class OrderBook:
    """Repository mapping table numbers to their current order.

    Repeated completion or payment is rejected with a typed error rather
    than treated as a no-op.
    """

    def __init__(self) -> None:
        self._orders: dict[int, Order] = {}

    def __len__(self) -> int:
        return len(self._orders)

    def __contains__(self, table_id: object) -> bool:
        return table_id in self._orders

    def get_order(self, table_id: int) -> Order:
        """Retrieve the order for a table.

        Args:
            table_id: Table number

        Returns:
            Order: The live order record

        Raises:
            NoSuchOrder: If the table has no order
        """
        order = self._orders.get(table_id)
        if order is None:
            raise NoSuchOrder(f"No order found for table {table_id}", table_id=table_id)
        return order

    def list_orders(self) -> list[Order]:
        """List all orders ordered by table number."""
        return [self._orders[table_id] for table_id in sorted(self._orders)]

    def append_items(self, table_id: int, items: Iterable[MenuItem]) -> Order:
        """Add items to a table's order, creating the order if needed.

        Args:
            table_id: Table number
            items: Items to append in guest-entry order

        Returns:
            Order: The updated order
        """
        order = self._orders.get(table_id)
        if order is None:
            order = Order(table_id=table_id)
            self._orders[table_id] = order
            logger.debug(f"Opened order for table {table_id}")

        order.items.extend(items)
        return order

    def mark_completed(self, table_id: int) -> None:
        """Mark a table's order as completed.

        Raises:
            NoSuchOrder: If the table has no order
            AlreadyCompleted: If the order is already completed
        """
        order = self.get_order(table_id)
        if order.completed:
            raise AlreadyCompleted(
                f"Order for table {table_id} is already completed", table_id=table_id
            )
        order.completed = True

    def mark_paid(self, table_id: int) -> None:
        """Mark a table's order as paid.

        Raises:
            NoSuchOrder: If the table has no order
            NotCompleted: If the order has not been completed
            AlreadyPaid: If the order is already paid
        """
        order = self.get_order(table_id)
        if not order.completed:
            raise NotCompleted(
                f"Order for table {table_id} is not completed yet", table_id=table_id
            )
        if order.paid:
            raise AlreadyPaid(f"Order for table {table_id} is already paid", table_id=table_id)
        order.paid = True

    def all_settled(self) -> bool:
        """Check whether every held order is completed and paid.

        An empty book reports True; whether that allows closing is decided
        by the workflow.
        """
        return all(order.is_settled for order in self._orders.values())

    def status_of(self, table_id: int) -> OrderStatus | None:
        """Return the status of a table's order, or None if it has none."""
        order = self._orders.get(table_id)
        return order.status if order is not None else None
