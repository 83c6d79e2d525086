"""Typed failures raised by the table, order and workflow layers.

Every failure is recoverable by the caller. Front ends decide how to present
them: the HTTP handler maps ``status_code`` onto the response, the terminal
handler prints ``str(error)`` and returns to its menu.
"""


class WorkflowError(Exception):
    """Base class for all order workflow failures."""

    code = "workflow_error"
    status_code = 400

    def __init__(self, message: str, table_id: int | None = None) -> None:
        super().__init__(message)
        self.table_id = table_id


class SeatingError(WorkflowError):
    """Seating request rejected by the table registry."""

    code = "seating_error"
    status_code = 409


class UnknownTable(SeatingError):
    code = "unknown_table"
    status_code = 404


class InvalidCount(SeatingError):
    code = "invalid_count"
    status_code = 422


class TableFull(SeatingError):
    code = "table_full"


class CapacityExceeded(SeatingError):
    code = "capacity_exceeded"


class InvalidSelection(WorkflowError):
    code = "invalid_selection"
    status_code = 422


class OrderError(WorkflowError):
    """Order state transition rejected by the order book."""

    code = "order_error"
    status_code = 409


class NoSuchOrder(OrderError):
    code = "no_such_order"
    status_code = 404


class AlreadyCompleted(OrderError):
    code = "already_completed"


class NotCompleted(OrderError):
    code = "not_completed"


class AlreadyPaid(OrderError):
    code = "already_paid"


class BillNotComputed(OrderError):
    code = "bill_not_computed"


class RestaurantError(WorkflowError):
    """Restaurant-wide operation rejected."""

    code = "restaurant_error"
    status_code = 409


class NotClosable(RestaurantError):
    code = "not_closable"


class RestaurantClosed(RestaurantError):
    code = "restaurant_closed"
