"""Menu data models.

The menu is fixed reference data loaded once at startup. Orders hold
references to these items; selections are made by 1-based position.
"""

from collections.abc import Iterable, Iterator

from pydantic import BaseModel, ConfigDict, Field

from restaurant_order_service.errors import InvalidSelection


class MenuItem(BaseModel):
    """Menu item model."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Item name", min_length=1)
    price: int = Field(..., description="Item price in whole currency units", ge=0)


DEFAULT_MENU_ITEMS: tuple[MenuItem, ...] = (
    MenuItem(name="Raw Fish", price=35),
    MenuItem(name="Eggs", price=45),
    MenuItem(name="Ham", price=38),
    MenuItem(name="Biscuits", price=38),
    MenuItem(name="Toast", price=38),
)


class MenuCatalog:
    """Ordered, immutable collection of menu items.

    Items are addressed by their 1-based position, which is what guests and
    staff see on the printed menu.
    """

    def __init__(self, items: Iterable[MenuItem] = DEFAULT_MENU_ITEMS) -> None:
        """Initialize the catalog.

        Args:
            items: Menu items in display order

        Raises:
            ValueError: If no items are provided
        """
        self._items = tuple(items)
        if not self._items:
            raise ValueError("Menu catalog requires at least one item")

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[MenuItem]:
        return iter(self._items)

    @property
    def items(self) -> tuple[MenuItem, ...]:
        return self._items

    def resolve(self, selection: int) -> MenuItem:
        """Resolve a 1-based menu selection to its item.

        Args:
            selection: Position on the menu, starting at 1

        Returns:
            MenuItem: The selected item

        Raises:
            InvalidSelection: If the selection is outside the menu
        """
        # bool is an int subclass; True must not silently mean item 1
        if isinstance(selection, bool) or not 1 <= selection <= len(self._items):
            raise InvalidSelection(
                f"Menu selection {selection} is not between 1 and {len(self._items)}"
            )
        return self._items[selection - 1]

    def resolve_all(self, selections: Iterable[int]) -> list[MenuItem]:
        """Resolve several selections, failing on the first invalid one."""
        return [self.resolve(selection) for selection in selections]
