"""Interactive terminal front end for a single front-of-house station.

Prompts, retry loops and messages live here. Every state change goes through
the OrderWorkflow, and workflow errors are shown to the operator before
returning to the main menu.
"""

import logging
from collections.abc import Callable

from restaurant_order_service.dependencies import create_order_workflow
from restaurant_order_service.errors import WorkflowError
from restaurant_order_service.models.order_models import OrderStatus
from restaurant_order_service.observability import configure_logging
from restaurant_order_service.services.order_workflow import OrderWorkflow

logger = logging.getLogger(__name__)

STATUS_LABELS = {
    OrderStatus.AWAITING_COMPLETION: "awaiting completion",
    OrderStatus.AWAITING_PAYMENT: "awaiting payment",
    OrderStatus.SETTLED: "all done",
}


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


class TerminalSession:
    """Drives the order workflow from a prompt/response terminal.

    The main menu only offers actions the workflow currently allows:
    completing and paying while orders are open, closing once every order
    is settled.
    """

    def __init__(
        self,
        workflow: OrderWorkflow,
        input_func: Callable[[str], str] = input,
        output_func: Callable[[str], None] = print,
    ) -> None:
        """Initialize the session.

        Args:
            workflow: Order workflow to operate on
            input_func: Reads one line of operator input after showing a prompt
            output_func: Writes one line of output
        """
        self.workflow = workflow
        self.input = input_func
        self.output = output_func

    def prompt_number(self, minimum: int, maximum: int, prompt: str) -> int:
        """Ask until the operator enters an integer within ``minimum..maximum``."""
        while True:
            raw = self.input(prompt)
            try:
                value = int(raw.strip())
            except ValueError:
                value = None

            if value is not None and minimum <= value <= maximum:
                return value
            self.output("Invalid input. Try again.")

    def menu_options(self) -> list[str]:
        options = ["1. Enter Order"]
        if self.workflow.has_open_orders():
            options.extend(["2. Complete Order", "3. Calculate and Pay Bill"])
        if self.workflow.can_close():
            options.append("4. Close the Restaurant")
        return options

    def show_menu(self) -> None:
        self.output("--- Menu ---")
        for position, item in enumerate(self.workflow.menu, start=1):
            self.output(f"{position}. {item.name} - ${item.price}")

    def show_status(self) -> None:
        for table_id, status in self.workflow.status_report():
            self.output(f"Table #{table_id} status: {STATUS_LABELS[status]}")

    def _prompt_table(self, prompt: str) -> int:
        table_count = len(self.workflow.table_registry.table_ids)
        return self.prompt_number(1, table_count, prompt)

    def place_order(self) -> None:
        table_count = len(self.workflow.table_registry.table_ids)
        table_id = self._prompt_table(f"Enter table number (1-{table_count}): ")

        if self.workflow.status_of(table_id) not in (None, OrderStatus.AWAITING_COMPLETION):
            self.output(f"Sorry! The order for table {table_id} has already been completed.")
            return

        available = self.workflow.available_seats(table_id)
        if available <= 0:
            self.output(f"Sorry! Table {table_id} is full.")
            return

        if available <= 2:
            self.output(f"Act quickly! Only {_plural(available, 'seat')} left at this table.")
        else:
            self.output(f"Notice: there are {available} seats available at this table.")

        guest_count = self.prompt_number(1, available, "Enter number of guests to seat: ")

        self.show_menu()
        selections = [
            self.prompt_number(1, len(self.workflow.menu), f"Guest {guest}, enter item number: ")
            for guest in range(1, guest_count + 1)
        ]

        try:
            self.workflow.place_order(
                table_id=table_id, guest_count=guest_count, selections=selections
            )
        except WorkflowError as e:
            self.output(f"Order not placed: {e}")
            return

        self.output(f"Order placed for table {table_id} successfully.")

    def complete_order(self) -> None:
        self.show_status()
        table_id = self._prompt_table("Enter table number to complete order: ")

        try:
            self.workflow.complete_order(table_id=table_id)
        except WorkflowError as e:
            self.output(str(e))
            return

        self.output(f"Order for table {table_id} marked as complete, awaiting payment.")

    def pay_for_order(self) -> None:
        self.show_status()
        table_id = self._prompt_table("Enter table number to pay: ")

        try:
            bill = self.workflow.compute_bill(table_id=table_id)
        except WorkflowError as e:
            self.output(str(e))
            if e.code == "not_completed":
                self.output("Please complete the order before payment.")
            return

        self.output(f"Subtotal: ${bill.subtotal}")
        self.output(f"Tax: ${bill.tax:.2f}")
        self.output(f"Tip: ${bill.tip:.2f}")
        self.output(f"Total: ${bill.total:.2f}")

        answer = self.input("Confirm payment? (y/n): ").strip().lower()
        if not answer.startswith("y"):
            self.output("Payment cancelled.")
            return

        try:
            record = self.workflow.confirm_payment(table_id=table_id)
        except WorkflowError as e:
            self.output(str(e))
            return

        if record.receipt_path:
            self.output(f"Payment successful. Receipt saved to '{record.receipt_path}'.")
        else:
            self.output(
                f"Payment successful as transaction {record.transaction_id}, "
                "but the receipt could not be saved."
            )

    def close_restaurant(self) -> None:
        try:
            self.workflow.close()
        except WorkflowError as e:
            self.output(str(e))
            return

        self.output("Goodbye!")

    def run(self) -> None:
        """Serve the main menu until the restaurant is closed."""
        while not self.workflow.closed:
            self.output("")
            self.output("--- MAIN MENU ---")
            for option in self.menu_options():
                self.output(option)

            choice = self.prompt_number(1, 4, "Choose an option: ")

            if choice == 1:
                self.place_order()
            elif choice == 2:
                if self.workflow.has_open_orders():
                    self.complete_order()
                else:
                    self.output("No orders available to complete.")
            elif choice == 3:
                if self.workflow.has_open_orders():
                    self.pay_for_order()
                else:
                    self.output("No unpaid orders available.")
            else:
                self.close_restaurant()


def main() -> int:
    """Console entry point for the ``restaurant-terminal`` command."""
    configure_logging("WARNING")

    session = TerminalSession(create_order_workflow())
    try:
        session.run()
    except (EOFError, KeyboardInterrupt):
        logger.warning("Terminal session ended before the restaurant was closed")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
