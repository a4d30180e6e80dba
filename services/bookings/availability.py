"""The availability flag that gates new bookings on an item."""
import logging

from common.errors import ItemNotAvailable

from .stores import ItemStore

logger = logging.getLogger(__name__)


class AvailabilityGuard:
    """
    Reads and flips ``Item.available``.

    A booking may only be created while the flag is set, and approving a
    booking clears it. Nothing here sets it back to true; re-listing an
    item is left to whoever manages the catalog.
    """

    def __init__(self, items: ItemStore) -> None:
        self.items = items

    def check_available(self, item_id: int) -> bool:
        return self.items.is_available(item_id)

    def ensure_available(self, item_id: int) -> None:
        if not self.check_available(item_id):
            raise ItemNotAvailable(f"Item {item_id} is not available", details={"item_id": item_id})

    def set_available(self, item_id: int, available: bool) -> None:
        self.items.set_available(item_id, available)
        logger.debug("Item %s availability set to %s", item_id, available)
