"""Available-copy counts per catalog item."""

from ..db.schemas import BOOKS, Item
from ..db.store import CollectionStore
from .errors import NotFound, OutOfStock


class InventoryLedger:
    """Counter of lendable copies per item.

    Pure counter semantics: ``decrement`` refuses to go below zero and
    ``increment`` has no upper bound. These are the only writers of
    ``available`` in the lending core.
    """

    def __init__(self, store: CollectionStore, collection: str = BOOKS):
        self.store = store
        self.collection = collection

    def _load(self) -> list[Item]:
        return [Item.model_validate(doc) for doc in self.store.get(self.collection, [])]

    def _save(self, items: list[Item]) -> None:
        self.store.put(self.collection, [item.to_document() for item in items])

    def _find(self, items: list[Item], item_id: str) -> Item:
        for item in items:
            if item.id == item_id:
                return item
        raise NotFound("Item", item_id)

    def get(self, item_id: str) -> Item:
        """Get an item by ID.

        Raises:
            NotFound: If the item does not exist
        """
        return self._find(self._load(), item_id)

    def items(self) -> list[Item]:
        """All catalog items, in stored order."""
        return self._load()

    def available(self, item_id: str) -> int:
        """Number of copies currently lendable."""
        return self.get(item_id).available

    def decrement(self, item_id: str) -> int:
        """Take one copy out of circulation.

        Args:
            item_id: Item ID

        Returns:
            New available count

        Raises:
            OutOfStock: If no copy is available
            NotFound: If the item does not exist
        """
        items = self._load()
        item = self._find(items, item_id)
        if item.available <= 0:
            raise OutOfStock(item_id)
        item.available -= 1
        self._save(items)
        return item.available

    def increment(self, item_id: str) -> int:
        """Put one copy back into circulation.

        Args:
            item_id: Item ID

        Returns:
            New available count

        Raises:
            NotFound: If the item does not exist
        """
        items = self._load()
        item = self._find(items, item_id)
        item.available += 1
        self._save(items)
        return item.available
