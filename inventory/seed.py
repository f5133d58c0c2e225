"""Seed file handling: populate an empty store at startup, export on demand.

The same JSON file serves as bootstrap data and as the backup target, so an
export followed by a volume reset restores the inventory on the next start.
"""

import json
import logging
from pathlib import Path
from typing import List

from pydantic import TypeAdapter, ValidationError

from .database import ProductStore
from .errors import SeedFileError, StoreError
from .models import Product

logger = logging.getLogger(__name__)

_PRODUCT_LIST = TypeAdapter(List[Product])


class SeedService:

    def __init__(self, store: ProductStore, seed_file: Path):
        self.store = store
        self.seed_file = Path(seed_file)

    def seed_if_empty(self) -> int:
        """Load the seed file into the store if the store has no products.

        Returns:
            Number of products inserted (0 when nothing was loaded).

        Raises:
            SeedFileError: If the seed file exists but is not a valid product list.
            StoreError: If the store cannot be counted or written.
        """
        count = self.store.count()
        if count > 0:
            logger.info("Store already populated with %d products, skipping seed", count)
            return 0

        logger.info("Store is empty, looking for seed file %s", self.seed_file)
        try:
            raw = self.seed_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Seed file %s not readable (%s), starting with an empty inventory",
                           self.seed_file, e)
            return 0

        try:
            products = _PRODUCT_LIST.validate_json(raw)
        except ValidationError as e:
            raise SeedFileError(f"Malformed seed file {self.seed_file}: {e}")

        inserted = self.store.insert_many(products)
        logger.info("Loaded %d products from %s", len(inserted), self.seed_file)
        return len(inserted)

    def seed_on_startup(self) -> int:
        try:
            return self.seed_if_empty()
        except (SeedFileError, StoreError) as e:
            logger.error("Seeding skipped: %s", e)
            return 0

    def export(self) -> int:
        """Overwrite the seed file with a snapshot of every product in the store."""
        listing = self.store.find_all()
        if listing.skipped:
            logger.warning("Export left out %d malformed documents", listing.skipped)

        payload = json.dumps([p.to_wire() for p in listing.products], indent=2)
        try:
            self.seed_file.parent.mkdir(parents=True, exist_ok=True)
            self.seed_file.write_text(payload, encoding="utf-8")
        except OSError as e:
            raise SeedFileError(f"Failed to write backup to {self.seed_file}: {e}")

        logger.info("Backup of %d products saved to %s", len(listing.products), self.seed_file)
        return len(listing.products)
