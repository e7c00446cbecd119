from datetime import datetime, timedelta, timezone

from sqlalchemy.exc import OperationalError

import routers.alerts
from core.config import settings
from db.inventory import Category, Item


def _log(client, item_id, expiry, quantity=None, store="A", **extra):
    body = {"item_id": item_id, "store": store, "shift": "AM", "staff": "S01", "expiry": expiry}
    if quantity is not None:
        body["quantity"] = quantity
    body.update(extra)
    res = client.post("/api/log", json=body)
    assert res.status_code == 201, res.text
    return res.json()


def _in(hours):
    return (datetime.now(timezone.utc) + timedelta(hours=hours)).isoformat()


class TestHealth:
    def test_ok(self, client):
        res = client.get("/api/health")
        assert res.status_code == 200
        assert res.json() == {"ok": True}

    def test_missing_database_url(self, unconfigured_client):
        res = unconfigured_client.get("/api/health")
        assert res.status_code == 503
        assert res.json() == {"ok": False, "error": "missing_database_url"}


class TestUnconfigured:
    def test_data_endpoints_fail_closed(self, unconfigured_client):
        for path in ("/api/expiry?store=A", "/api/low_stock?store=A", "/api/alerts?store=A", "/api/items"):
            res = unconfigured_client.get(path)
            assert res.status_code == 500, path
            assert res.json() == {"detail": "database is not configured"}

    def test_log_fails_closed(self, unconfigured_client):
        res = unconfigured_client.post(
            "/api/log",
            json={"item_id": 1, "store": "A", "shift": "AM", "staff": "S01", "expiry": "2026-10-20"},
        )
        assert res.status_code == 500


class TestCatalog:
    def test_items_sorted_and_filtered(self, client, add_items):
        add_items(
            Item(store="A", name="Milk", category="Dairy"),
            Item(store="A", name="Bread", category="Bread"),
            Item(store="A", name="Honey Mustard", category="Sauce", sub_category="Sandwich Unit"),
            Item(store="A", name="Chipotle", category="Sauce", sub_category="Sandwich Unit"),
            Item(store="A", name="Sweet Onion", category="Sauce", sub_category="Standby"),
            Item(store=None, name="Cookies", category="Dry Goods"),
            Item(store="B", name="Corn", category="Vegetables"),
            Item(store="A", name="Old Item", category="Dairy", is_active=False),
            Item(store="A", name="Gone", category="Dairy", deleted_at=datetime(2026, 1, 1)),
        )

        res = client.get("/api/items", params={"store": "A"})
        assert res.status_code == 200
        assert [it["name"] for it in res.json()] == [
            "Bread",
            "Milk",
            "Cookies",
            "Chipotle",
            "Honey Mustard",
            "Sweet Onion",
        ]

        all_names = [it["name"] for it in client.get("/api/items").json()]
        assert "Corn" in all_names
        assert "Old Item" not in all_names

    def test_categories_require_store(self, client):
        res = client.get("/api/categories")
        assert res.status_code == 400
        assert res.json()["detail"] == "store is required"

    def test_categories_order(self, client, add_items):
        add_items(
            Category(store="A", name="Sauce", sort_order=50),
            Category(store="A", name="Bread", sort_order=10),
            Category(store="A", name="Misc", sort_order=None),
            Category(store="A", name="Dairy", sort_order=10),
            Category(store="B", name="Protein", sort_order=1),
        )
        names = [c["name"] for c in client.get("/api/categories", params={"store": "A"}).json()]
        assert names == ["Bread", "Dairy", "Sauce", "Misc"]


class TestLogSubmission:
    def test_quantity_zero_vs_absent(self, client, add_items):
        [milk] = add_items(Item(store="A", name="Milk", category="Dairy", sub_category="Fresh"))

        zero = _log(client, milk, "2026-10-20", quantity=0)
        absent = _log(client, milk, "2026-10-20")
        blank = _log(client, milk, "2026-10-20", quantity="")

        assert zero["quantity"] == 0
        assert absent["quantity"] is None
        assert blank["quantity"] is None

    def test_returns_persisted_row_with_catalog_snapshot(self, client, add_items):
        [milk] = add_items(Item(store="A", name="Milk", category="Dairy", sub_category="Fresh"))

        row = _log(client, milk, "2026-10-20T23:59:00Z", quantity=3)

        assert row["id"] > 0
        assert row["item_name"] == "Milk"
        assert row["category"] == "Dairy"
        assert row["sub_category"] == "Fresh"
        assert row["expiry"] == "2026-10-20T23:59:00Z"
        assert row["created_at"]

    def test_missing_fields_are_named(self, client, add_items):
        [milk] = add_items(Item(store="A", name="Milk", category="Dairy"))
        base = {"item_id": milk, "store": "A", "shift": "AM", "staff": "S01", "expiry": "2026-10-20"}

        for field in ("store", "shift", "staff", "item_id", "expiry"):
            body = dict(base)
            body.pop(field)
            res = client.post("/api/log", json=body)
            assert res.status_code == 400, field
            assert res.json()["detail"] == f"{field} is required"

        res = client.post("/api/log", json={**base, "staff": "   "})
        assert res.status_code == 400

    def test_bad_quantity(self, client, add_items):
        [milk] = add_items(Item(store="A", name="Milk", category="Dairy"))
        body = {"item_id": milk, "store": "A", "shift": "AM", "staff": "S01", "expiry": "2026-10-20"}

        assert client.post("/api/log", json={**body, "quantity": -1}).status_code == 422
        assert client.post("/api/log", json={**body, "quantity": "lots"}).status_code == 422

    def test_unknown_item(self, client):
        res = client.post(
            "/api/log",
            json={"item_id": 999, "store": "A", "shift": "AM", "staff": "S01", "expiry": "2026-10-20"},
        )
        assert res.status_code == 404


class TestAlertEndpoints:
    def test_store_is_required(self, client):
        for path in ("/api/expiry", "/api/low_stock", "/api/alerts"):
            res = client.get(path, params={"store": " "})
            assert res.status_code == 400, path

    def test_expiry_alerts(self, client, add_items):
        milk, bread, corn, cookies = add_items(
            Item(store=None, name="Milk", category="Dairy"),
            Item(store="A", name="Bread", category="Bread"),
            Item(store="A", name="Corn", category="Vegetables"),
            Item(store="A", name="Cookies", category="Dry Goods"),
        )
        _log(client, milk, _in(1), quantity=4)
        _log(client, bread, _in(-3), quantity=2)
        _log(client, corn, _in(48), quantity=1)
        _log(client, cookies, "whenever", quantity=0)
        _log(client, milk, _in(2), quantity=6, store="B")

        res = client.get("/api/expiry", params={"store": "A"})

        assert res.status_code == 200
        data = res.json()
        assert [a["item_id"] for a in data] == [bread, milk]
        assert data[0]["name"] == "Bread"
        assert data[1]["quantity"] == 4

    def test_latest_observation_wins(self, client, add_items):
        [milk] = add_items(Item(store="A", name="Milk", category="Dairy"))
        _log(client, milk, _in(1), quantity=1)
        _log(client, milk, _in(72), quantity=9)

        assert client.get("/api/expiry", params={"store": "A"}).json() == []

    def test_alerts_low_stock_is_filtered_expiry_set(self, client, add_items):
        dairy, sauce, plenty, later = add_items(
            Item(store="A", name="Milk", category="Dairy"),
            Item(store="A", name="Chipotle", category="Sauces"),
            Item(store="A", name="Cheese", category="Dairy"),
            Item(store="A", name="Corn", category="Vegetables"),
        )
        _log(client, dairy, _in(2), quantity=2)
        _log(client, sauce, _in(1), quantity=2)
        _log(client, plenty, _in(1), quantity=3)
        _log(client, later, _in(30), quantity=0)

        data = client.get("/api/alerts", params={"store": "A"}).json()

        assert [a["item_id"] for a in data["expiry"]] == [sauce, plenty, dairy]
        assert [a["item_id"] for a in data["low_stock"]] == [dairy]

    def test_zero_stock_scenario(self, client, add_items):
        x, y, z = add_items(
            Item(store="A", name="X", category="Sauce"),
            Item(store="A", name="Y", category="Dairy"),
            Item(store="A", name="Z", category="Dairy"),
        )
        _log(client, x, _in(72), quantity=5)
        _log(client, y, _in(72), quantity=0)
        _log(client, z, _in(72), quantity=1)
        _log(client, x, _in(72), quantity=0)

        zero = client.get("/api/low_stock", params={"store": "A"}).json()
        assert [a["item_id"] for a in zero] == [x, y]
        assert zero[0]["category"] == "Sauce"

        alerts = client.get("/api/alerts", params={"store": "A"}).json()
        assert alerts == {"expiry": [], "low_stock": []}

    def test_backing_store_error_is_500(self, client, monkeypatch):
        async def _boom(db, store):
            raise OperationalError("SELECT", {}, Exception("connection refused"))

        monkeypatch.setattr(routers.alerts, "_load_current_state", _boom)

        res = client.get("/api/low_stock", params={"store": "A"})
        assert res.status_code == 500
        assert "connection refused" in res.json()["detail"]

    def test_out_of_range_expiry_is_skipped_not_fatal(self, client, add_items):
        early, late, milk = add_items(
            Item(store="A", name="Early", category="Dairy"),
            Item(store="A", name="Late", category="Dairy"),
            Item(store="A", name="Milk", category="Dairy"),
        )
        _log(client, early, "0001-01-01T00:00:00+01:00", quantity=0)
        _log(client, late, "9999-12-31T23:59:59-01:00", quantity=0)
        _log(client, milk, _in(1), quantity=1)

        expiry = client.get("/api/expiry", params={"store": "A"})
        assert expiry.status_code == 200
        assert [a["item_id"] for a in expiry.json()] == [milk]

        alerts = client.get("/api/alerts", params={"store": "A"})
        assert alerts.status_code == 200
        assert [a["item_id"] for a in alerts.json()["low_stock"]] == [milk]

        zero = client.get("/api/low_stock", params={"store": "A"})
        assert zero.status_code == 200
        assert {a["item_id"] for a in zero.json()} == {early, late}
        assert all(a["expiry"] is None for a in zero.json())

    def test_read_is_capped_at_newest_rows(self, client, add_items, monkeypatch):
        monkeypatch.setattr(settings, "log_fetch_limit", 3)
        old, recent = add_items(
            Item(store="A", name="Old", category="Dairy"),
            Item(store="A", name="Recent", category="Dairy"),
        )
        _log(client, old, _in(1), quantity=0)
        for qty in (4, 2, 0):
            _log(client, recent, _in(1), quantity=qty)

        zero = client.get("/api/low_stock", params={"store": "A"}).json()
        assert [a["item_id"] for a in zero] == [recent]

        expiring = client.get("/api/expiry", params={"store": "A"}).json()
        assert [a["item_id"] for a in expiring] == [recent]

    def test_other_store_item_is_rejected(self, client, add_items):
        [corn] = add_items(Item(store="B", name="Corn", category="Vegetables"))
        res = client.post(
            "/api/log",
            json={"item_id": corn, "store": "A", "shift": "AM", "staff": "S01", "expiry": "2026-10-20"},
        )
        assert res.status_code == 404

        assert _log(client, corn, "2026-10-20", quantity=1, store="B")["item_id"] == corn


class TestSession:
    def test_start(self, client):
        res = client.post("/api/session", json={"store": "PDD", "shift": "PM", "staff": "S01 Alex"})
        assert res.status_code == 201
        data = res.json()
        assert data["store"] == "PDD"
        assert data["expires_at"] > data["started_at"]

    def test_missing_shift(self, client):
        res = client.post("/api/session", json={"store": "PDD", "staff": "S01"})
        assert res.status_code == 400
        assert res.json()["detail"] == "shift is required"
