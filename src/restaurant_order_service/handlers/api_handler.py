"""FastAPI application for front-of-house order endpoints."""

import logging

from fastapi import Depends, FastAPI, Header, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from restaurant_order_service.auth.api_dependencies import get_api_key_from_header
from restaurant_order_service.auth.api_key_validator import APIKeyValidator
from restaurant_order_service.errors import WorkflowError
from restaurant_order_service.models.menu_models import MenuItem
from restaurant_order_service.models.order_models import Bill, OrderStatus, PaymentRecord
from restaurant_order_service.services.order_workflow import OrderWorkflow

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str


class MenuEntryResponse(BaseModel):
    """A menu item together with the number guests select it by."""

    selection: int
    name: str
    price: int


class TableResponse(BaseModel):
    """Occupancy and order status of a table."""

    id: int
    capacity: int
    seated_guests: int
    available_seats: int
    order_status: OrderStatus | None = None


class SeatsResponse(BaseModel):
    """Free seats at a table."""

    table_id: int
    available_seats: int


class PlaceOrderRequest(BaseModel):
    """Request model for seating guests with their selections."""

    guest_count: int = Field(..., description="Number of guests to seat")
    selections: list[int] = Field(..., description="1-based menu selections, one per guest")


class OrderResponse(BaseModel):
    """Response model for a table's order."""

    table_id: int
    status: OrderStatus
    items: list[MenuItem]
    completed: bool
    paid: bool


class OrderStatusEntry(BaseModel):
    """Status line of the order status report."""

    table_id: int
    status: OrderStatus


class RestaurantStatusResponse(BaseModel):
    """Whether the restaurant has open orders and may close."""

    open_orders: bool
    can_close: bool
    closed: bool


def create_app(workflow: OrderWorkflow, api_keys: list[str]) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        workflow: Order workflow the endpoints operate on
        api_keys: List of valid staff API keys

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Restaurant Order Service API",
        description="Front-of-house API for seating, orders, billing and closing",
        version="1.0.0",
    )

    # Store services in app state for access in route handlers
    app.state.workflow = workflow
    app.state.api_key_validator = APIKeyValidator(api_keys=api_keys)

    @app.exception_handler(WorkflowError)
    async def handle_workflow_error(request: Request, exc: WorkflowError) -> JSONResponse:
        """Translate workflow failures into JSON error responses."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.code, "detail": str(exc)},
        )

    def validate_api_key(x_api_key: str | None = Header(None)) -> str:
        """Dependency to validate API key."""
        return get_api_key_from_header(x_api_key=x_api_key, validator=app.state.api_key_validator)

    def order_response(table_id: int) -> OrderResponse:
        order = app.state.workflow.order_book.get_order(table_id)
        return OrderResponse(
            table_id=table_id,
            status=order.status,
            items=order.items,
            completed=order.completed,
            paid=order.paid,
        )

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy")

    @app.get("/menu", response_model=list[MenuEntryResponse], tags=["Menu"])
    async def get_menu() -> list[MenuEntryResponse]:
        """List the menu with the selection number of each item."""
        return [
            MenuEntryResponse(selection=position, name=item.name, price=item.price)
            for position, item in enumerate(app.state.workflow.menu, start=1)
        ]

    @app.get("/tables", response_model=list[TableResponse], tags=["Tables"])
    async def list_tables(_api_key: str = Depends(validate_api_key)) -> list[TableResponse]:
        """List every table with its occupancy and order status."""
        workflow: OrderWorkflow = app.state.workflow
        return [
            TableResponse(
                id=table.id,
                capacity=table.capacity,
                seated_guests=table.seated_guests,
                available_seats=table.available_seats,
                order_status=workflow.status_of(table.id),
            )
            for table in workflow.table_registry.list_tables()
        ]

    @app.get("/tables/{table_id}/seats", response_model=SeatsResponse, tags=["Tables"])
    async def get_available_seats(
        table_id: int,
        _api_key: str = Depends(validate_api_key),
    ) -> SeatsResponse:
        """Get the number of free seats at a table."""
        seats = app.state.workflow.available_seats(table_id)
        return SeatsResponse(table_id=table_id, available_seats=seats)

    @app.post(
        "/tables/{table_id}/orders",
        response_model=OrderResponse,
        status_code=201,
        tags=["Orders"],
    )
    async def place_order(
        table_id: int,
        order_request: PlaceOrderRequest,
        _api_key: str = Depends(validate_api_key),
    ) -> OrderResponse:
        """Seat guests at a table and add their selections to its order.

        Args:
            table_id: The table to seat the guests at
            order_request: Guest count and one menu selection per guest

        Returns:
            The table's order after the new items were added
        """
        logger.info(f"Order requested for table {table_id} with {order_request.guest_count} guests")
        app.state.workflow.place_order(
            table_id=table_id,
            guest_count=order_request.guest_count,
            selections=order_request.selections,
        )
        return order_response(table_id)

    @app.get("/tables/{table_id}/order", response_model=OrderResponse, tags=["Orders"])
    async def get_order(
        table_id: int,
        _api_key: str = Depends(validate_api_key),
    ) -> OrderResponse:
        """Get a table's order and its status."""
        app.state.workflow.table_registry.get_table(table_id)
        return order_response(table_id)

    @app.post(
        "/tables/{table_id}/order/complete",
        response_model=OrderResponse,
        tags=["Orders"],
    )
    async def complete_order(
        table_id: int,
        _api_key: str = Depends(validate_api_key),
    ) -> OrderResponse:
        """Mark a table's order as completed."""
        app.state.workflow.complete_order(table_id=table_id)
        return order_response(table_id)

    @app.get("/tables/{table_id}/order/bill", response_model=Bill, tags=["Billing"])
    async def get_bill(
        table_id: int,
        _api_key: str = Depends(validate_api_key),
    ) -> Bill:
        """Compute the bill for a completed order."""
        bill: Bill = app.state.workflow.compute_bill(table_id=table_id)
        return bill

    @app.post(
        "/tables/{table_id}/order/payment",
        response_model=PaymentRecord,
        tags=["Billing"],
    )
    async def confirm_payment(
        table_id: int,
        _api_key: str = Depends(validate_api_key),
    ) -> PaymentRecord:
        """Confirm payment of the last computed bill and free the table."""
        record: PaymentRecord = app.state.workflow.confirm_payment(table_id=table_id)
        return record

    @app.get("/orders/status", response_model=list[OrderStatusEntry], tags=["Orders"])
    async def get_status_report(
        _api_key: str = Depends(validate_api_key),
    ) -> list[OrderStatusEntry]:
        """Report the status of every table holding an order."""
        return [
            OrderStatusEntry(table_id=table_id, status=status)
            for table_id, status in app.state.workflow.status_report()
        ]

    def restaurant_status() -> RestaurantStatusResponse:
        workflow: OrderWorkflow = app.state.workflow
        return RestaurantStatusResponse(
            open_orders=workflow.has_open_orders(),
            can_close=workflow.can_close(),
            closed=workflow.closed,
        )

    @app.get("/restaurant", response_model=RestaurantStatusResponse, tags=["Restaurant"])
    async def get_restaurant_status(
        _api_key: str = Depends(validate_api_key),
    ) -> RestaurantStatusResponse:
        """Report whether orders are open and whether the restaurant may close."""
        return restaurant_status()

    @app.post("/restaurant/close", response_model=RestaurantStatusResponse, tags=["Restaurant"])
    async def close_restaurant(
        _api_key: str = Depends(validate_api_key),
    ) -> RestaurantStatusResponse:
        """Close the restaurant once every order is settled."""
        app.state.workflow.close()
        logger.info("Restaurant closed via API")
        return restaurant_status()

    return app
