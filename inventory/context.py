# inventory/context.py
from dataclasses import dataclass

from .config import Settings
from .database import ProductStore, connect_store
from .seed import SeedService


@dataclass
class AppContext:
    """Services shared by every request handler. Owns the product store."""
    store: ProductStore
    seeder: SeedService

    def close(self) -> None:
        self.store.close()


def build_context(settings: Settings) -> AppContext:
    store = connect_store(settings)
    return AppContext(store=store, seeder=SeedService(store, settings.seed_file))
