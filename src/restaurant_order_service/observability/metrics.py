"""Custom metrics for the restaurant order service."""

from opentelemetry import metrics

# Get meter for order service
meter = metrics.get_meter("order-svc")

orders_placed_counter = meter.create_counter(
    name="orders_placed_total",
    description="Total number of order placements by table",
    unit="1",
)

# Guests currently seated across all tables
seated_guests_gauge = meter.create_up_down_counter(
    name="seated_guests",
    description="Current number of seated guests",
    unit="1",
)

orders_completed_counter = meter.create_counter(
    name="orders_completed_total",
    description="Total number of orders marked complete",
    unit="1",
)

payments_counter = meter.create_counter(
    name="payments_total",
    description="Total number of confirmed payments",
    unit="1",
)

payment_amount_histogram = meter.create_histogram(
    name="payment_amount",
    description="Total amount of confirmed payments, including tax and tip",
    unit="USD",
)

workflow_rejection_counter = meter.create_counter(
    name="workflow_rejections_total",
    description="Total number of rejected workflow operations by error code",
    unit="1",
)


def record_order_placed(table_id: int, guest_count: int) -> None:
    """Record a successful order placement.

    Args:
        table_id: The table the order was placed for
        guest_count: Number of guests seated with the order
    """
    orders_placed_counter.add(1, {"table_id": table_id})
    seated_guests_gauge.add(guest_count)


def record_order_completed(table_id: int) -> None:
    """Record an order being marked complete.

    Args:
        table_id: The table whose order was completed
    """
    orders_completed_counter.add(1, {"table_id": table_id})


def record_payment(table_id: int, total: float, guests_released: int) -> None:
    """Record a confirmed payment.

    Args:
        table_id: The table that paid
        total: Amount paid including tax and tip
        guests_released: Number of guests whose seats were freed
    """
    payments_counter.add(1, {"table_id": table_id})
    payment_amount_histogram.record(total, {"table_id": table_id})
    seated_guests_gauge.add(-guests_released)


def record_rejection(operation: str, error_code: str) -> None:
    """Record a rejected workflow operation.

    Args:
        operation: The workflow operation (e.g., "place_order", "confirm_payment")
        error_code: Code of the error that was raised
    """
    workflow_rejection_counter.add(1, {"operation": operation, "error_code": error_code})
