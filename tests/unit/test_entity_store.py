"""
Unit tests for the entity store.
Tests identity lookups, relationship indexes and snapshot integrity checks.
"""

import pytest
from dataclasses import replace
from decimal import Decimal

from app.core.exceptions import SnapshotIntegrityError
from app.store import entities
from app.store.snapshot import EntityStore


class TestLookups:
    """Test identity lookups and enumeration order"""

    def test_collections_are_in_identity_order(self, webstore_entities):
        webstore_entities["customers"] = list(reversed(webstore_entities["customers"]))
        store = EntityStore(**webstore_entities)

        assert [c.customer_id for c in store.customers] == [1, 2, 3, 4]

    def test_get_by_identity(self, store):
        assert store.get_customer(2).full_name == "Bob Stone"
        assert store.get_product(3).name == "Laptop"
        assert store.get_order(4).status == "Pending"
        assert store.get_order_item(5).unit_price is None
        assert store.get_category(1).name == "Electronics"
        assert store.get_carrier(1).name == "DHL"

    def test_missing_identity_returns_none(self, store):
        assert store.get_customer(999) is None
        assert store.get_order(999) is None
        assert store.get_product(999) is None
        assert store.get_carrier(None) is None

    def test_category_by_name(self, store):
        assert store.category_by_name("Office").category_id == 2
        assert store.category_by_name("Garden") is None

    def test_counts(self, store):
        assert store.counts() == {
            "customers": 4,
            "orders": 4,
            "order_items": 5,
            "products": 5,
            "categories": 3,
            "carriers": 3,
        }


class TestRelationshipIndexes:
    """Test pre-resolved foreign key indexes"""

    def test_orders_of_customer(self, store):
        assert [o.order_id for o in store.orders_of_customer(1)] == [1, 2]
        assert store.orders_of_customer(4) == ()

    def test_items_of_order(self, store):
        assert [i.order_item_id for i in store.items_of_order(1)] == [1, 2]
        assert store.items_of_order(2) == ()

    def test_items_of_product(self, store):
        assert [i.order_item_id for i in store.items_of_product(3)] == [4, 5]
        assert store.items_of_product(4) == ()

    def test_product_category_is_symmetric(self, store):
        assert [c.name for c in store.categories_of_product(3)] == ["Electronics", "Office"]
        assert [p.name for p in store.products_of_category(1)] == ["Cable", "Laptop", "Tablet"]
        assert store.products_of_category(3) == ()

    def test_orders_of_carrier(self, store):
        assert [o.order_id for o in store.orders_of_carrier(1)] == [2]
        assert store.orders_of_carrier(3) == ()

    def test_duplicate_junction_rows_are_ignored(self, webstore_entities):
        webstore_entities["product_categories"].append(entities.ProductCategory(3, 1))
        store = EntityStore(**webstore_entities)

        assert [c.name for c in store.categories_of_product(3)] == ["Electronics", "Office"]


class TestIntegrity:
    """Test that malformed snapshots are rejected"""

    def test_item_with_missing_product(self, webstore_entities):
        webstore_entities["order_items"].append(entities.OrderItem(9, 1, 42, 1, Decimal("1.00")))

        with pytest.raises(SnapshotIntegrityError, match="missing product 42"):
            EntityStore(**webstore_entities)

    def test_item_with_missing_order(self, webstore_entities):
        webstore_entities["order_items"].append(entities.OrderItem(9, 42, 1, 1, Decimal("1.00")))

        with pytest.raises(SnapshotIntegrityError, match="missing order 42"):
            EntityStore(**webstore_entities)

    def test_order_with_missing_customer(self, webstore_entities):
        webstore_entities["orders"][0] = replace(webstore_entities["orders"][0], customer_id=42)

        with pytest.raises(SnapshotIntegrityError, match="missing customer 42"):
            EntityStore(**webstore_entities)

    def test_order_with_missing_carrier(self, webstore_entities):
        webstore_entities["orders"][0] = replace(webstore_entities["orders"][0], carrier_id=42)

        with pytest.raises(SnapshotIntegrityError, match="missing carrier 42"):
            EntityStore(**webstore_entities)

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_quantity(self, webstore_entities, quantity):
        webstore_entities["order_items"][0] = replace(webstore_entities["order_items"][0], quantity=quantity)

        with pytest.raises(SnapshotIntegrityError, match="invalid quantity"):
            EntityStore(**webstore_entities)

    def test_duplicate_identity(self, webstore_entities):
        webstore_entities["products"].append(entities.Product(1, "Cable copy", Decimal("1.00")))

        with pytest.raises(SnapshotIntegrityError, match="Duplicate product identity 1"):
            EntityStore(**webstore_entities)

    def test_dangling_category_link(self, webstore_entities):
        webstore_entities["product_categories"].append(entities.ProductCategory(1, 42))

        with pytest.raises(SnapshotIntegrityError, match="dangling"):
            EntityStore(**webstore_entities)

    def test_empty_store(self):
        store = EntityStore()

        assert store.customers == ()
        assert store.orders_of_customer(1) == ()
