"""Table, order and billing models.

These models carry the state owned by the table registry and the order book,
plus the derived bill and the payment record handed to receipt sinks.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from restaurant_order_service.models.menu_models import MenuItem

DEFAULT_TABLE_CAPACITY = 4


class OrderStatus(str, Enum):
    """Enumeration of order lifecycle states."""

    AWAITING_COMPLETION = "awaiting_completion"
    AWAITING_PAYMENT = "awaiting_payment"
    SETTLED = "settled"


class Table(BaseModel):
    """A physical seating unit with a fixed guest capacity.

    Validated on every assignment so ``seated_guests`` can never leave the
    range ``0..capacity``.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: int = Field(..., description="Table number", gt=0)
    capacity: int = Field(default=DEFAULT_TABLE_CAPACITY, description="Maximum guests", gt=0)
    seated_guests: int = Field(default=0, description="Guests currently seated", ge=0)

    @model_validator(mode="after")
    def validate_occupancy(self) -> "Table":
        """Validate that seated guests never exceed capacity."""
        if self.seated_guests > self.capacity:
            raise ValueError("seated_guests must not exceed capacity")
        return self

    @property
    def available_seats(self) -> int:
        return self.capacity - self.seated_guests


class Order(BaseModel):
    """The menu selections of one table's dining session.

    Both flags only ever move from False to True. Items are kept after
    completion and payment so receipts and status reports can use them.
    """

    model_config = ConfigDict(validate_assignment=True)

    table_id: int = Field(..., description="Table this order belongs to", gt=0)
    items: list[MenuItem] = Field(default_factory=list, description="Items in guest-entry order")
    completed: bool = Field(default=False, description="Whether the order has been served")
    paid: bool = Field(default=False, description="Whether payment has been confirmed")

    @model_validator(mode="after")
    def validate_paid_requires_completed(self) -> "Order":
        """Validate that an order cannot be paid before it is completed."""
        if self.paid and not self.completed:
            raise ValueError("an order cannot be paid before it is completed")
        return self

    @property
    def status(self) -> OrderStatus:
        """Derive the lifecycle status from the two flags."""
        if not self.completed:
            return OrderStatus.AWAITING_COMPLETION
        if not self.paid:
            return OrderStatus.AWAITING_PAYMENT
        return OrderStatus.SETTLED

    @property
    def is_settled(self) -> bool:
        return self.completed and self.paid


class Bill(BaseModel):
    """Amounts owed for a completed order, not persisted until payment."""

    model_config = ConfigDict(frozen=True)

    table_id: int
    subtotal: int = Field(..., ge=0)
    tax: float = Field(..., ge=0)
    tip: float = Field(..., ge=0)
    total: float = Field(..., ge=0)
    tax_rate: float
    tip_rate: float


class PaymentRecord(BaseModel):
    """Record of a confirmed payment, persisted by a receipt sink."""

    table_id: int
    items: list[MenuItem]
    subtotal: int
    tax: float
    tip: float
    total: float
    tax_rate: float
    tip_rate: float
    transaction_id: str = Field(..., min_length=1)
    paid_at: datetime
    receipt_path: str | None = Field(None, description="Where the receipt was written, if anywhere")

    @property
    def receipt_filename(self) -> str:
        return f"Transaction#{self.transaction_id}.txt"
