"""In-memory repository for the restaurant's tables.

The set of tables is fixed when the registry is created. Unlike the
receipt collaborators, which log and return None, the registry raises typed
seating errors: the workflow must know exactly why a seating was refused.
"""

import logging

from restaurant_order_service.errors import InvalidCount, TableFull, UnknownTable
from restaurant_order_service.models.order_models import DEFAULT_TABLE_CAPACITY, Table

logger = logging.getLogger(__name__)

DEFAULT_TABLE_COUNT = 4


class TableRegistry:
    """Repository owning every table and its seating counter.

    Tables are numbered 1..table_count and are never added or removed while
    the registry is alive.
    """

    def __init__(
        self,
        table_count: int = DEFAULT_TABLE_COUNT,
        capacity: int = DEFAULT_TABLE_CAPACITY,
    ) -> None:
        """Initialize the registry.

        Args:
            table_count: Number of tables to create
            capacity: Guest capacity of every table

        Raises:
            ValueError: If table_count or capacity is not positive
        """
        if table_count <= 0:
            raise ValueError("table_count must be positive")
        if capacity <= 0:
            raise ValueError("capacity must be positive")

        self._tables: dict[int, Table] = {
            table_id: Table(id=table_id, capacity=capacity)
            for table_id in range(1, table_count + 1)
        }

    @property
    def table_ids(self) -> list[int]:
        return list(self._tables)

    def __contains__(self, table_id: object) -> bool:
        return table_id in self._tables

    def get_table(self, table_id: int) -> Table:
        """Retrieve a table.

        Args:
            table_id: Table number

        Returns:
            Table: The live table record

        Raises:
            UnknownTable: If no such table is configured
        """
        table = self._tables.get(table_id)
        if table is None:
            raise UnknownTable(
                f"Table {table_id} does not exist (tables 1-{len(self._tables)})",
                table_id=table_id,
            )
        return table

    def list_tables(self) -> list[Table]:
        """List all tables ordered by table number."""
        return [self._tables[table_id] for table_id in sorted(self._tables)]

    def available_seats(self, table_id: int) -> int:
        """Return the number of free seats at a table."""
        return self.get_table(table_id).available_seats

    def seat_guests(self, table_id: int, count: int) -> None:
        """Seat guests at a table.

        Args:
            table_id: Table number
            count: Number of guests to seat

        Raises:
            UnknownTable: If no such table is configured
            InvalidCount: If count is not positive
            TableFull: If count exceeds the free seats
        """
        table = self.get_table(table_id)

        if count <= 0:
            raise InvalidCount(f"Guest count must be positive, got {count}", table_id=table_id)

        if count > table.available_seats:
            raise TableFull(
                f"Table {table_id} has {table.available_seats} free seats, cannot seat {count}",
                table_id=table_id,
            )

        table.seated_guests += count
        logger.debug(f"Seated {count} guests at table {table_id}")

    def release_guests(self, table_id: int, count: int) -> None:
        """Undo a seating of ``count`` guests.

        Used to roll back a seating when the rest of an operation fails.

        Raises:
            UnknownTable: If no such table is configured
            InvalidCount: If count is not positive or more than are seated
        """
        table = self.get_table(table_id)

        if count <= 0 or count > table.seated_guests:
            raise InvalidCount(
                f"Cannot release {count} guests from table {table_id} "
                f"with {table.seated_guests} seated",
                table_id=table_id,
            )

        table.seated_guests -= count

    def reset_occupancy(self, table_id: int) -> None:
        """Free every seat at a table.

        Raises:
            UnknownTable: If no such table is configured
        """
        table = self.get_table(table_id)
        table.seated_guests = 0
        logger.debug(f"Reset occupancy of table {table_id}")
