import csv
import io
import time
from datetime import datetime, timedelta
from decimal import Decimal

import pytest


def _sell(client, headers, product_id: int, times: int = 1) -> dict:
    for _ in range(times):
        client.post("/pos/cart/items", json={"product_id": product_id}, headers=headers)
    response = client.post("/pos/checkout", json={"payment_method": "Cash"}, headers=headers)
    assert response.status_code == 201
    return response.json()


def test_reports_are_hidden_from_cashiers(client, cashier_headers):
    assert client.get("/reports/dashboard", headers=cashier_headers).status_code == 403
    assert client.get("/reports/profit-and-loss", headers=cashier_headers).status_code == 403
    assert client.get("/reports/expenses", headers=cashier_headers).status_code == 403
    assert client.put("/settings", json={"shop_name": "Other Shop", "tax_rate": "1"}, headers=cashier_headers).status_code == 403
    assert client.get("/settings/export/sales", headers=cashier_headers).status_code == 403


def test_profit_and_loss_for_this_month(client, cashier_headers, manager_headers):
    _sell(client, cashier_headers, 1)
    expense = client.post(
        "/reports/expenses",
        json={"category": "Utilities", "description": "ESCOM electricity", "amount": "10000"},
        headers=manager_headers,
    )
    assert expense.status_code == 201

    report = client.get("/reports/profit-and-loss", headers=manager_headers).json()
    assert report["period"] == "this_month"
    assert report["sales_count"] == 1
    assert Decimal(report["revenue"]) == Decimal("52425")
    assert Decimal(report["cogs"]) == Decimal("35000")
    assert Decimal(report["gross_profit"]) == Decimal("17425")
    assert Decimal(report["total_expenses"]) == Decimal("10000")
    assert Decimal(report["net_profit"]) == Decimal("7425")
    assert report["expenses_by_category"] == [{"category": "Utilities", "amount": "10000.00"}]
    assert len(report["daily"]) >= 1


def test_custom_range_needs_both_dates(client, manager_headers):
    today = datetime.utcnow().date().isoformat()
    assert client.get("/reports/profit-and-loss", params={"date_from": today}, headers=manager_headers).status_code == 400

    earlier = (datetime.utcnow().date() - timedelta(days=3)).isoformat()
    response = client.get(
        "/reports/profit-and-loss",
        params={"date_from": earlier, "date_to": today},
        headers=manager_headers,
    )
    assert response.status_code == 200
    assert response.json()["period"] == "custom"

    inverted = client.get(
        "/reports/profit-and-loss",
        params={"date_from": today, "date_to": earlier},
        headers=manager_headers,
    )
    assert inverted.status_code == 400


def test_old_expense_falls_outside_this_month(client, manager_headers):
    long_ago = (datetime.utcnow() - timedelta(days=120)).isoformat()
    client.post(
        "/reports/expenses",
        json={"category": "Rent", "description": "Old rent", "amount": "5000", "incurred_at": long_ago},
        headers=manager_headers,
    )
    this_month = client.get("/reports/profit-and-loss", headers=manager_headers).json()
    all_time = client.get("/reports/profit-and-loss", params={"period": "all_time"}, headers=manager_headers).json()
    assert Decimal(this_month["total_expenses"]) == 0
    assert Decimal(all_time["total_expenses"]) == Decimal("5000")


def test_invalid_expense_is_rejected(client, manager_headers):
    response = client.post(
        "/reports/expenses",
        json={"category": "Utilities", "description": "  ", "amount": "100"},
        headers=manager_headers,
    )
    assert response.status_code == 400
    response = client.post(
        "/reports/expenses",
        json={"category": "Utilities", "description": "Water", "amount": "0"},
        headers=manager_headers,
    )
    assert response.status_code == 400
    assert client.get("/reports/expenses", headers=manager_headers).json() == []


def test_dashboard(client, cashier_headers, manager_headers):
    _sell(client, cashier_headers, 4, times=2)
    summary = client.get("/reports/dashboard", headers=manager_headers).json()
    assert summary["total_transactions"] == 1
    assert Decimal(summary["total_revenue"]) == Decimal("3262")
    assert len(summary["last_7_days"]) == 7
    assert Decimal(summary["last_7_days"][-1]["total"]) == Decimal("3262")


@pytest.fixture
def local_zone(request, monkeypatch):
    monkeypatch.setenv("TZ", request.param)
    time.tzset()
    yield request.param
    monkeypatch.undo()
    time.tzset()


@pytest.mark.skipif(not hasattr(time, "tzset"), reason="time.tzset is unavailable")
@pytest.mark.parametrize("local_zone", ["Etc/GMT-14", "Etc/GMT+12"], indirect=True)
def test_report_days_follow_stored_sale_times(client, cashier_headers, manager_headers, local_zone):
    _sell(client, cashier_headers, 1)
    today = datetime.utcnow().date().isoformat()

    day = client.get(
        "/reports/profit-and-loss",
        params={"date_from": today, "date_to": today},
        headers=manager_headers,
    ).json()
    assert day["sales_count"] == 1
    assert Decimal(day["revenue"]) == Decimal("52425")

    month = client.get("/reports/profit-and-loss", headers=manager_headers).json()
    assert Decimal(month["revenue"]) == Decimal("52425")

    summary = client.get("/reports/dashboard", headers=manager_headers).json()
    assert Decimal(summary["last_7_days"][-1]["total"]) == Decimal("52425")



def test_settings_update_changes_cart_tax(client, cashier_headers, manager_headers):
    current = client.get("/settings", headers=cashier_headers).json()
    assert current["shop_name"] == "Kante Liquor"

    updated = dict(current, tax_rate="10", receipt_footer="Drink responsibly")
    response = client.put("/settings", json=updated, headers=manager_headers)
    assert response.status_code == 200
    assert Decimal(response.json()["tax_rate"]) == Decimal("10")

    cart = client.post("/pos/cart/items", json={"product_id": 1}, headers=cashier_headers).json()
    assert Decimal(cart["totals"]["tax"]) == Decimal("4500")

    logs = client.get("/settings/activity-logs", headers=manager_headers).json()
    assert logs[0]["action"] == "Settings Updated"
    assert "10" in logs[0]["details"]


def test_settings_reject_out_of_range_tax(client, manager_headers):
    response = client.put("/settings", json={"shop_name": "Kante Liquor", "tax_rate": "150"}, headers=manager_headers)
    assert response.status_code == 422


def test_export_inventory_csv(client, manager_headers):
    response = client.get("/settings/export/inventory", headers=manager_headers)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "inventory_export_" in response.headers["content-disposition"]

    rows = list(csv.DictReader(io.StringIO(response.text)))
    assert len(rows) == 7
    assert {row["name"] for row in rows} >= {"Jack Daniels 750ml", "Castel Beer"}


def test_export_sales_csv(client, cashier_headers, manager_headers):
    assert client.get("/settings/export/sales", headers=manager_headers).status_code == 404

    sale = _sell(client, cashier_headers, 6)
    response = client.get("/settings/export/sales", headers=manager_headers)
    assert response.status_code == 200
    assert "sales_report_" in response.headers["content-disposition"]

    rows = list(csv.DictReader(io.StringIO(response.text)))
    assert [row["id"] for row in rows] == [sale["id"]]
    assert "Coca Cola 300ml" in rows[0]["items"]


def test_unknown_export_kind(client, manager_headers):
    assert client.get("/settings/export/users", headers=manager_headers).status_code == 422


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
