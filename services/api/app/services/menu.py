from __future__ import annotations

from collections.abc import Callable, Iterable

from packages.shared.schemas.cook_spot_v1 import CookSpotV1, MenuItemV1


class MenuCatalog:
    """Menu items by id: the house menu first, then menus embedded in live cook spots."""

    def __init__(
        self,
        items: Iterable[MenuItemV1],
        spots: Callable[[], Iterable[CookSpotV1]] | None = None,
    ) -> None:
        self._items = {item.id: item for item in items}
        self._spots = spots

    def all(self) -> list[MenuItemV1]:
        return list(self._items.values())

    def get(self, item_id: str) -> MenuItemV1 | None:
        item = self._items.get(item_id)
        if item is not None or self._spots is None:
            return item

        for spot in self._spots():
            for candidate in spot.menu:
                if candidate.id == item_id:
                    return candidate
        return None
