"""Order workflow for seating, completing and paying table orders."""

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import UTC, datetime

from restaurant_order_service.adapters.receipt_sink import ReceiptSink
from restaurant_order_service.errors import (
    AlreadyCompleted,
    AlreadyPaid,
    BillNotComputed,
    CapacityExceeded,
    InvalidSelection,
    NotClosable,
    NotCompleted,
    RestaurantClosed,
    WorkflowError,
)
from restaurant_order_service.models.menu_models import MenuCatalog
from restaurant_order_service.models.order_models import Bill, Order, OrderStatus, PaymentRecord
from restaurant_order_service.observability.decorators import traced
from restaurant_order_service.observability.metrics import (
    record_order_completed,
    record_order_placed,
    record_payment,
    record_rejection,
)
from restaurant_order_service.repositories.order_book import OrderBook
from restaurant_order_service.repositories.table_registry import TableRegistry
from restaurant_order_service.services.transaction_ids import (
    RandomTransactionIdGenerator,
    TransactionIdGenerator,
)

logger = logging.getLogger(__name__)

TAX_RATE = 0.10
TIP_RATE = 0.20


@contextmanager
def _recording_rejections(operation: str) -> Iterator[None]:
    try:
        yield
    except WorkflowError as e:
        record_rejection(operation, e.code)
        logger.info(
            f"{operation} rejected: {e}", extra={"error_code": e.code, "table_id": e.table_id}
        )
        raise


class OrderWorkflow:
    """State machine over the table registry and the order book.

    Each table's order moves forward only:
    no order -> awaiting completion -> awaiting payment -> settled.
    Every operation validates fully before mutating, so a rejected call
    leaves both containers untouched.
    """

    def __init__(
        self,
        table_registry: TableRegistry,
        order_book: OrderBook,
        menu: MenuCatalog,
        transaction_ids: TransactionIdGenerator | None = None,
        receipt_sink: ReceiptSink | None = None,
        tax_rate: float = TAX_RATE,
        tip_rate: float = TIP_RATE,
    ) -> None:
        """Initialize the OrderWorkflow.

        Args:
            table_registry: Owner of table seating counters
            order_book: Owner of table orders
            menu: Catalog used to resolve guest selections
            transaction_ids: Source of payment identifiers (random by default)
            receipt_sink: Optional sink receipts are written to on payment
            tax_rate: Tax as a fraction of the subtotal
            tip_rate: Tip as a fraction of the subtotal
        """
        self.table_registry = table_registry
        self.order_book = order_book
        self.menu = menu
        self.transaction_ids = transaction_ids or RandomTransactionIdGenerator()
        self.receipt_sink = receipt_sink
        self.tax_rate = tax_rate
        self.tip_rate = tip_rate
        self._pending_bills: dict[int, Bill] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @traced("order.place")
    def place_order(self, table_id: int, guest_count: int, selections: Sequence[int]) -> Order:
        """Seat guests at a table and record one menu selection per guest.

        Args:
            table_id: Table to seat the guests at
            guest_count: Number of guests joining the table
            selections: 1-based menu positions, one per guest

        Returns:
            Order: The table's order after the new items were appended

        Raises:
            RestaurantClosed: If the restaurant has been closed
            UnknownTable: If the table does not exist
            CapacityExceeded: If guest_count is not positive or exceeds the free seats
            AlreadyCompleted: If the table's order has already been completed
            InvalidSelection: If the selections do not match the guests or the menu
        """
        with _recording_rejections("place_order"):
            if self._closed:
                raise RestaurantClosed("The restaurant is closed", table_id=table_id)

            available = self.table_registry.available_seats(table_id)

            if not 0 < guest_count <= available:
                raise CapacityExceeded(
                    f"Table {table_id} has {available} free seats, cannot seat {guest_count}",
                    table_id=table_id,
                )

            if self.order_book.status_of(table_id) not in (None, OrderStatus.AWAITING_COMPLETION):
                raise AlreadyCompleted(
                    f"Order for table {table_id} is already completed, no items can be added",
                    table_id=table_id,
                )

            if len(selections) != guest_count:
                raise InvalidSelection(
                    f"Expected {guest_count} selections, got {len(selections)}",
                    table_id=table_id,
                )
            items = self.menu.resolve_all(selections)

            self.table_registry.seat_guests(table_id, guest_count)
            try:
                order = self.order_book.append_items(table_id, items)
            except Exception:
                self.table_registry.release_guests(table_id, guest_count)
                raise

        record_order_placed(table_id, guest_count)
        logger.info(f"Order placed for table {table_id} with {guest_count} guests")
        return order

    @traced("order.complete")
    def complete_order(self, table_id: int) -> None:
        """Mark a table's order as completed.

        Raises:
            NoSuchOrder: If the table has no order
            AlreadyCompleted: If the order is already completed
        """
        with _recording_rejections("complete_order"):
            self.order_book.mark_completed(table_id)

        record_order_completed(table_id)
        logger.info(f"Order for table {table_id} marked complete, awaiting payment")

    @traced("order.bill")
    def compute_bill(self, table_id: int) -> Bill:
        """Compute the bill for a completed order.

        Idempotent: repeated calls before payment return equal bills. The
        result is remembered as the bill a following payment confirms.

        Raises:
            NoSuchOrder: If the table has no order
            NotCompleted: If the order has not been completed
            AlreadyPaid: If the order has already been paid
        """
        with _recording_rejections("compute_bill"):
            order = self.order_book.get_order(table_id)
            if not order.completed:
                raise NotCompleted(
                    f"Order for table {table_id} is not completed yet", table_id=table_id
                )
            if order.paid:
                raise AlreadyPaid(f"Order for table {table_id} is already paid", table_id=table_id)

        subtotal = sum(item.price for item in order.items)
        tax = round(subtotal * self.tax_rate, 2)
        tip = round(subtotal * self.tip_rate, 2)
        bill = Bill(
            table_id=table_id,
            subtotal=subtotal,
            tax=tax,
            tip=tip,
            total=round(subtotal + tax + tip, 2),
            tax_rate=self.tax_rate,
            tip_rate=self.tip_rate,
        )
        self._pending_bills[table_id] = bill
        return bill

    @traced("order.pay")
    def confirm_payment(self, table_id: int) -> PaymentRecord:
        """Confirm payment of the most recently computed bill.

        Marks the order paid, frees every seat at the table and hands the
        payment record to the receipt sink, if one is configured.

        Returns:
            PaymentRecord: The confirmed payment, with ``receipt_path`` set
            when a receipt was written

        Raises:
            NoSuchOrder: If the table has no order
            AlreadyPaid: If the order has already been paid
            NotCompleted: If the order has not been completed
            BillNotComputed: If no bill was computed for the order
        """
        with _recording_rejections("confirm_payment"):
            order = self.order_book.get_order(table_id)
            if order.paid:
                raise AlreadyPaid(f"Order for table {table_id} is already paid", table_id=table_id)
            if not order.completed:
                raise NotCompleted(
                    f"Order for table {table_id} is not completed yet", table_id=table_id
                )

            bill = self._pending_bills.get(table_id)
            if bill is None:
                raise BillNotComputed(
                    f"Bill for table {table_id} must be computed before payment",
                    table_id=table_id,
                )

            transaction_id = self.transaction_ids.next_id()
            guests_released = self.table_registry.get_table(table_id).seated_guests

            self.order_book.mark_paid(table_id)
            self.table_registry.reset_occupancy(table_id)
            del self._pending_bills[table_id]

        record = PaymentRecord(
            table_id=table_id,
            items=list(order.items),
            subtotal=bill.subtotal,
            tax=bill.tax,
            tip=bill.tip,
            total=bill.total,
            tax_rate=bill.tax_rate,
            tip_rate=bill.tip_rate,
            transaction_id=transaction_id,
            paid_at=datetime.now(UTC),
        )

        if self.receipt_sink is not None:
            receipt_path = self.receipt_sink.write_receipt(record)
            if receipt_path is None:
                logger.warning(f"No receipt stored for transaction {transaction_id}")
            record.receipt_path = receipt_path

        record_payment(table_id, bill.total, guests_released)
        logger.info(
            f"Payment confirmed for table {table_id}",
            extra={"transaction_id": transaction_id, "total": bill.total},
        )
        return record

    def status_of(self, table_id: int) -> OrderStatus | None:
        """Return the order status of a table, or None if it has no order.

        Raises:
            UnknownTable: If the table does not exist
        """
        self.table_registry.get_table(table_id)
        return self.order_book.status_of(table_id)

    def available_seats(self, table_id: int) -> int:
        """Return the free seats at a table.

        Raises:
            UnknownTable: If the table does not exist
        """
        return self.table_registry.available_seats(table_id)

    def status_report(self) -> list[tuple[int, OrderStatus]]:
        """List the status of every table holding an order, by table number."""
        return [(order.table_id, order.status) for order in self.order_book.list_orders()]

    def has_open_orders(self) -> bool:
        """Check whether any order still awaits completion or payment."""
        return not self.order_book.all_settled()

    def can_close(self) -> bool:
        """Check whether the restaurant may close.

        Requires at least one order and every order settled; a restaurant
        that never took an order is not closable.
        """
        return len(self.order_book) > 0 and self.order_book.all_settled()

    def close(self) -> None:
        """Close the restaurant, after which no orders are accepted.

        Raises:
            NotClosable: If can_close() is False
        """
        with _recording_rejections("close"):
            if not self.can_close():
                if len(self.order_book) == 0:
                    raise NotClosable("Cannot close before any order has been placed")
                raise NotClosable("Cannot close while orders are still pending")

        self._closed = True
        logger.info("Restaurant closed")
