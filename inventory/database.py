"""
MongoDB-backed product store.

The API only ever talks to a ProductStore; MongoProductStore is the
production implementation over a single collection. Every operation runs
under a bounded deadline and any driver failure surfaces as StoreError.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

import pymongo
from bson import ObjectId
from bson.errors import BSONError
from pydantic import ValidationError
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from .config import Settings
from .errors import StoreError
from .models import Product, ProductListing

# bson raises its own errors (and OverflowError) while encoding documents
DRIVER_ERRORS = (PyMongoError, BSONError, OverflowError)

logger = logging.getLogger(__name__)

MUTABLE_FIELDS = ("name", "price", "stock")


class ProductStore(ABC):

    @abstractmethod
    def find_all(self) -> ProductListing:
        ...

    @abstractmethod
    def insert(self, product: Product) -> str:
        """Persist a product under a freshly minted id and return that id."""

    @abstractmethod
    def insert_many(self, products: List[Product]) -> List[str]:
        ...

    @abstractmethod
    def update_by_id(self, product_id: str, fields: Dict[str, Any]) -> bool:
        """Replace name/price/stock. Returns False when no product has that id."""

    @abstractmethod
    def delete_by_id(self, product_id: str) -> bool:
        ...

    @abstractmethod
    def count(self) -> int:
        ...

    def close(self) -> None:
        pass


def _to_document(product: Product, oid: ObjectId) -> Dict[str, Any]:
    return {
        "_id": oid,
        "name": product.name,
        "price": product.price,
        "stock": product.stock,
    }


def _from_document(doc: Dict[str, Any]) -> Product:
    return Product(
        id=str(doc["_id"]),
        name=doc["name"],
        price=doc["price"],
        stock=doc["stock"],
    )


class MongoProductStore(ProductStore):
    def __init__(self,
                 collection: Collection,
                 timeout: float = 5.0,
                 client: Optional[MongoClient] = None):
        """
        Wrap `collection`. When `client` is given the store owns it and
        closes it on close().
        """
        self.collection = collection
        self.timeout = timeout
        self._client = client

    def find_all(self) -> ProductListing:
        products: List[Product] = []
        skipped = 0
        try:
            with pymongo.timeout(self.timeout):
                for doc in self.collection.find({}):
                    try:
                        products.append(_from_document(doc))
                    except (KeyError, TypeError, ValidationError) as e:
                        skipped += 1
                        logger.warning("Skipping malformed product document %s: %s", doc.get("_id"), e)
        except DRIVER_ERRORS as e:
            raise StoreError(f"Failed to list products: {e}")
        return ProductListing(products=products, skipped=skipped)

    def insert(self, product: Product) -> str:
        oid = ObjectId()
        try:
            with pymongo.timeout(self.timeout):
                self.collection.insert_one(_to_document(product, oid))
        except DRIVER_ERRORS as e:
            raise StoreError(f"Failed to insert product: {e}")
        return str(oid)

    def insert_many(self, products: Iterable[Product]) -> List[str]:
        docs = []
        for p in products:
            # exported records keep their ids so a backup restores as-is
            oid = ObjectId(p.id) if p.id and ObjectId.is_valid(p.id) else ObjectId()
            docs.append(_to_document(p, oid))
        if not docs:
            return []
        try:
            with pymongo.timeout(self.timeout):
                self.collection.insert_many(docs)
        except DRIVER_ERRORS as e:
            raise StoreError(f"Failed to insert {len(docs)} products: {e}")
        return [str(d["_id"]) for d in docs]

    def update_by_id(self, product_id: str, fields: Dict[str, Any]) -> bool:
        update = {"$set": {k: fields[k] for k in MUTABLE_FIELDS}}
        try:
            with pymongo.timeout(self.timeout):
                result = self.collection.update_one({"_id": ObjectId(product_id)}, update)
        except DRIVER_ERRORS as e:
            raise StoreError(f"Failed to update product {product_id}: {e}")
        return result.matched_count > 0

    def delete_by_id(self, product_id: str) -> bool:
        try:
            with pymongo.timeout(self.timeout):
                result = self.collection.delete_one({"_id": ObjectId(product_id)})
        except DRIVER_ERRORS as e:
            raise StoreError(f"Failed to delete product {product_id}: {e}")
        return result.deleted_count > 0

    def count(self) -> int:
        try:
            with pymongo.timeout(self.timeout):
                return self.collection.count_documents({})
        except DRIVER_ERRORS as e:
            raise StoreError(f"Failed to count products: {e}")

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None


def connect_store(settings: Settings) -> MongoProductStore:
    """
    Connect to MongoDB and return a store over the configured collection.
    Fails fast with StoreError if the server cannot be reached.
    """
    try:
        client: MongoClient = MongoClient(
            settings.mongo_uri,
            serverSelectionTimeoutMS=int(settings.connect_timeout * 1000),
        )
    except PyMongoError as e:
        raise StoreError(f"Invalid MongoDB connection string: {e}")
    try:
        with pymongo.timeout(settings.connect_timeout):
            client.admin.command("ping")
    except PyMongoError as e:
        client.close()
        raise StoreError(f"Failed to connect to MongoDB: {e}")

    collection = client[settings.mongo_db][settings.mongo_collection]
    logger.info("Connected to MongoDB database '%s', collection '%s'",
                settings.mongo_db, settings.mongo_collection)
    return MongoProductStore(collection, timeout=settings.store_timeout, client=client)
