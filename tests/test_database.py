"""Tests for the MongoDB product store, against a mocked collection."""

from unittest.mock import MagicMock, patch

import pytest
from bson import ObjectId
from pymongo.errors import ServerSelectionTimeoutError, BulkWriteError

from inventory.config import Settings
from inventory.database import MongoProductStore, connect_store
from inventory.errors import StoreError
from inventory.models import Product


@pytest.fixture
def collection():
    return MagicMock()


@pytest.fixture
def mongo_store(collection):
    return MongoProductStore(collection, timeout=2.0)


def test_find_all_maps_documents(mongo_store, collection):
    oid = ObjectId()
    collection.find.return_value = [{"_id": oid, "name": "A", "price": 10.0, "stock": 2}]

    listing = mongo_store.find_all()

    assert listing.products == [Product(id=str(oid), name="A", price=10.0, stock=2)]
    assert listing.skipped == 0


def test_find_all_empty_collection(mongo_store, collection):
    collection.find.return_value = []

    listing = mongo_store.find_all()

    assert listing.products == []
    assert listing.skipped == 0


def test_find_all_skips_and_counts_malformed_documents(mongo_store, collection):
    good = ObjectId()
    collection.find.return_value = [
        {"_id": ObjectId(), "name": "no price", "stock": 1},
        {"_id": good, "name": "ok", "price": 1.5, "stock": 3},
        {"_id": ObjectId(), "name": "bad stock", "price": 1.0, "stock": "lots"},
    ]

    listing = mongo_store.find_all()

    assert [p.id for p in listing.products] == [str(good)]
    assert listing.skipped == 2


def test_insert_mints_fresh_id(mongo_store, collection):
    given = str(ObjectId())

    pid = mongo_store.insert(Product(id=given, name="A", price=1.0, stock=1))

    doc = collection.insert_one.call_args[0][0]
    assert pid != given
    assert doc == {"_id": ObjectId(pid), "name": "A", "price": 1.0, "stock": 1}


def test_insert_many_empty_is_noop(mongo_store, collection):
    assert mongo_store.insert_many([]) == []
    collection.insert_many.assert_not_called()


def test_insert_many_keeps_valid_ids(mongo_store, collection):
    kept = str(ObjectId())

    ids = mongo_store.insert_many([
        Product(id=kept, name="A", price=1.0, stock=1),
        Product(id="garbage", name="B", price=2.0, stock=2),
        Product(name="C", price=3.0, stock=3),
    ])

    docs = collection.insert_many.call_args[0][0]
    assert ids[0] == kept
    assert len(set(ids)) == 3
    assert [d["_id"] for d in docs] == [ObjectId(i) for i in ids]


def test_update_sets_exactly_mutable_fields(mongo_store, collection):
    pid = str(ObjectId())
    collection.update_one.return_value.matched_count = 1

    assert mongo_store.update_by_id(pid, {"name": "N", "price": 2.0, "stock": 3, "id": "x"})

    collection.update_one.assert_called_once_with(
        {"_id": ObjectId(pid)},
        {"$set": {"name": "N", "price": 2.0, "stock": 3}},
    )


def test_update_reports_missing(mongo_store, collection):
    collection.update_one.return_value.matched_count = 0

    assert not mongo_store.update_by_id(str(ObjectId()), {"name": "N", "price": 2.0, "stock": 3})


def test_delete_reports_result(mongo_store, collection):
    collection.delete_one.return_value.deleted_count = 1
    assert mongo_store.delete_by_id(str(ObjectId()))

    collection.delete_one.return_value.deleted_count = 0
    assert not mongo_store.delete_by_id(str(ObjectId()))


def test_count(mongo_store, collection):
    collection.count_documents.return_value = 4
    assert mongo_store.count() == 4
    collection.count_documents.assert_called_once_with({})


@pytest.mark.parametrize("method, args", [
    ("find_all", ()),
    ("insert", (Product(name="A", price=1.0, stock=1),)),
    ("update_by_id", (str(ObjectId()), {"name": "A", "price": 1.0, "stock": 1})),
    ("delete_by_id", (str(ObjectId()),)),
    ("count", ()),
])
def test_driver_errors_become_store_errors(mongo_store, collection, method, args):
    error = ServerSelectionTimeoutError("no servers available")
    collection.find.side_effect = error
    collection.insert_one.side_effect = error
    collection.update_one.side_effect = error
    collection.delete_one.side_effect = error
    collection.count_documents.side_effect = error

    with pytest.raises(StoreError, match="no servers available"):
        getattr(mongo_store, method)(*args)


def test_insert_many_batch_failure(mongo_store, collection):
    collection.insert_many.side_effect = BulkWriteError({"writeErrors": [], "nInserted": 0})

    with pytest.raises(StoreError):
        mongo_store.insert_many([Product(name="A", price=1.0, stock=1)])


def test_close_releases_owned_client(collection):
    client = MagicMock()
    store = MongoProductStore(collection, client=client)

    store.close()
    store.close()

    client.close.assert_called_once()


def test_oversized_int_becomes_store_error(mongo_store, collection):
    collection.insert_one.side_effect = OverflowError("MongoDB can only handle up to 8-byte ints")

    with pytest.raises(StoreError, match="8-byte ints"):
        mongo_store.insert(Product(name="A", price=1.0, stock=1))


def test_find_all_skips_non_finite_price(mongo_store, collection):
    collection.find.return_value = [{"_id": ObjectId(), "name": "nan", "price": float("nan"), "stock": 1}]

    listing = mongo_store.find_all()

    assert listing.products == []
    assert listing.skipped == 1


class TestConnectStore:

    @pytest.fixture
    def settings(self):
        return Settings(mongo_uri="mongodb://db.invalid:27017", connect_timeout=0.5, store_timeout=1.5)

    def test_unreachable_server_closes_client(self, settings):
        with patch("inventory.database.MongoClient") as client_cls:
            client = client_cls.return_value
            client.admin.command.side_effect = ServerSelectionTimeoutError("db.invalid:27017: timed out")

            with pytest.raises(StoreError, match="Failed to connect"):
                connect_store(settings)

        client.close.assert_called_once()
        assert client_cls.call_args.kwargs["serverSelectionTimeoutMS"] == 500

    def test_returns_store_over_configured_collection(self, settings):
        with patch("inventory.database.MongoClient") as client_cls:
            store = connect_store(settings)

        client = client_cls.return_value
        client.admin.command.assert_called_once_with("ping")
        assert store.collection is client["inventario"]["productos"]
        assert store.timeout == 1.5

        store.close()
        client.close.assert_called_once()


def test_serve_exits_when_store_is_unreachable():
    from inventory import main

    settings = Settings(mongo_uri="mongodb://db.invalid:27017")
    with patch.object(main, "load_settings", return_value=settings), \
            patch.object(main, "build_context", side_effect=StoreError("Failed to connect to MongoDB")), \
            patch.object(main.uvicorn, "run") as run:
        with pytest.raises(SystemExit) as exc_info:
            main.serve()

    assert exc_info.value.code == 1
    run.assert_not_called()
