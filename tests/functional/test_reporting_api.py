"""
API tests for the reporting module.
Tests the report catalogue, report execution, parameter errors and export endpoints.
"""

import io
import pytest
from fastapi.routing import APIRoute
from fastapi.testclient import TestClient

import pandas as pd

from app.logging.models import Log
from app.store import models


class TestReportCatalogue:
    """Test listing the available reports"""

    def test_get_available_reports(self, client: TestClient):
        response = client.get("/api/reports/")
        assert response.status_code == 200

        reports = response.json()
        assert len(reports) == 11
        for report in reports:
            assert "name" in report
            assert "title" in report
            assert "columns" in report

        by_name = {r["name"]: r for r in reports}
        assert by_name["top-customers"]["parameters"] == {"limit": 3}
        assert by_name["customers"]["columns"] == ["full_name", "email"]


class TestReportExecution:
    """Test running each report over HTTP"""

    def test_customers(self, client: TestClient, seeded_store_db):
        response = client.get("/api/reports/customers")
        assert response.status_code == 200

        body = response.json()
        assert body["report"] == "customers"
        assert body["row_count"] == 4
        assert body["rows"][0] == {"full_name": "Ann Lee", "email": "ann.lee@example.com"}
        assert body["snapshot_version"]
        assert body["snapshot_loaded_at"]

    def test_top_customers_serializes_money_as_text(self, client: TestClient, seeded_store_db):
        response = client.get("/api/reports/top-customers")
        assert response.status_code == 200

        body = response.json()
        assert body["parameters"] == {"limit": 3}
        assert body["rows"] == [
            {"customer_name": "Cara West", "total_value": "150.00"},
            {"customer_name": "Ann Lee", "total_value": "24.00"},
            {"customer_name": "Bob Stone", "total_value": "24.00"},
        ]

    def test_top_customers_with_limit(self, client: TestClient, seeded_store_db):
        response = client.get("/api/reports/top-customers", params={"limit": 1})

        assert [r["customer_name"] for r in response.json()["rows"]] == ["Cara West"]

    def test_pending_orders(self, client: TestClient, seeded_store_db):
        rows = client.get("/api/reports/pending-orders").json()["rows"]

        assert [(r["order_id"], r["total"]) for r in rows] == [(1, "24.00"), (4, "150.00")]

    def test_recent_orders(self, client: TestClient, seeded_store_db):
        rows = client.get("/api/reports/recent-orders").json()["rows"]

        assert [r["order_id"] for r in rows] == [1, 3, 4]

    def test_category_orders(self, client: TestClient, seeded_store_db):
        response = client.get("/api/reports/category-orders", params={"category": "Office"})

        rows = response.json()["rows"]
        assert [(r["order_id"], r["products"]) for r in rows] == [(1, ["Notebook"]), (4, ["Laptop"])]

    def test_shipments(self, client: TestClient, seeded_store_db):
        rows = client.get("/api/reports/shipments").json()["rows"]

        assert [(r["carrier_name"], r["status"]) for r in rows] == [("DHL", "Delivered"), ("FedEx", "Shipped")]

    @pytest.mark.parametrize(
        "report_name",
        ["orders-with-item-counts", "products-by-price", "order-counts", "product-sales", "discounted-orders"],
    )
    def test_other_reports(self, client: TestClient, seeded_store_db, report_name):
        response = client.get(f"/api/reports/{report_name}")

        assert response.status_code == 200
        assert response.json()["report"] == report_name

    def test_empty_store(self, client: TestClient):
        response = client.get("/api/reports/top-customers")

        assert response.status_code == 200
        assert response.json()["rows"] == []


class TestReportErrors:
    """Test error responses"""

    def test_negative_limit(self, client: TestClient, seeded_store_db):
        response = client.get("/api/reports/top-customers", params={"limit": -1})

        assert response.status_code == 400
        assert "Top-N count" in response.json()["detail"]

    def test_negative_days(self, client: TestClient, seeded_store_db):
        response = client.get("/api/reports/recent-orders", params={"days": -3})

        assert response.status_code == 400

    def test_unknown_report(self, client: TestClient):
        response = client.get("/api/reports/best-sellers")

        assert response.status_code == 422

    def test_non_integer_limit(self, client: TestClient):
        response = client.get("/api/reports/top-customers", params={"limit": "many"})

        assert response.status_code == 422

    def test_inconsistent_snapshot(self, client: TestClient, seeded_store_db):
        seeded_store_db.add(models.OrderItem(order_item_id=99, order_id=1, product_id=42, quantity=1))
        seeded_store_db.commit()

        response = client.get("/api/reports/customers")

        assert response.status_code == 500
        assert "missing product 42" in response.json()["error"]


class TestReportExport:
    """Test export endpoints"""

    def test_csv_export(self, client: TestClient, seeded_store_db):
        response = client.get("/api/reports/top-customers/export", params={"format": "csv", "limit": 2})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "top-customers.csv" in response.headers["content-disposition"]
        assert response.text.splitlines() == ["customer_name,total_value", "Cara West,150.00", "Ann Lee,24.00"]

    def test_xlsx_export(self, client: TestClient, seeded_store_db):
        response = client.get("/api/reports/pending-orders/export", params={"format": "xlsx"})

        assert response.status_code == 200
        assert "pending-orders.xlsx" in response.headers["content-disposition"]
        df = pd.read_excel(io.BytesIO(response.content), engine="openpyxl")
        assert list(df.columns) == ["order_id", "customer_name", "order_date", "total"]
        assert list(df["order_id"]) == [1, 4]

    def test_unsupported_export_format(self, client: TestClient, seeded_store_db):
        response = client.get("/api/reports/customers/export", params={"format": "pdf"})

        assert response.status_code == 400
        assert "Unsupported export format" in response.json()["detail"]


class TestRequestLogging:
    """Test that API requests are written to the log database"""

    def test_request_is_logged(self, client: TestClient, log_db_session):
        client.get("/api/reports/")

        logs = log_db_session.query(Log).all()
        assert len(logs) == 1
        assert logs[0].path == "/api/reports/"
        assert logs[0].method == "GET"
        assert logs[0].status_code == 200
        assert logs[0].processing_time is not None

    def test_rejected_request_is_logged(self, client: TestClient, log_db_session):
        client.get("/api/reports/top-customers", params={"limit": -1})

        log = log_db_session.query(Log).one()
        assert log.status_code == 400
        assert log.query_string == "limit=-1"

    def test_inconsistent_snapshot_is_logged_once(self, client: TestClient, seeded_store_db, log_db_session):
        seeded_store_db.add(models.OrderItem(order_item_id=99, order_id=1, product_id=42, quantity=1))
        seeded_store_db.commit()

        client.get("/api/reports/customers")

        log = log_db_session.query(Log).one()
        assert log.status_code == 500
        assert "missing product 42" in log.response_body

    def test_validation_error_is_logged_once(self, client: TestClient, log_db_session):
        client.get("/api/reports/best-sellers")

        log = log_db_session.query(Log).one()
        assert log.status_code == 422
        assert "best-sellers" in log.response_body


class TestDependencies:
    """Test the dependency wiring of the reporting routes"""

    def test_routes_only_use_the_webstore_session(self, client: TestClient):
        def calls(dependant):
            yield dependant.call
            for dependency in dependant.dependencies:
                yield from calls(dependency)

        session_providers = set()
        for route in client.app.routes:
            if isinstance(route, APIRoute):
                session_providers.update(
                    call.__name__ for call in calls(route.dependant)
                    if getattr(call, "__module__", None) == "app.core.database"
                )

        assert session_providers == {"get_store_db"}
