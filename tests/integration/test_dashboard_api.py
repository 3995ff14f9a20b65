# -*- coding: utf-8 -*-
"""
Test Dashboard API (SQL store)
"""

from decimal import Decimal

import pytest


def seed(client, headers):
    rows = [
        {"title": "Salário jan", "amount": "1000", "date": "2024-01-05", "type": "income", "status": "received"},
        {"title": "Salário fev", "amount": "3000", "date": "2024-02-01", "type": "income", "status": "received"},
        {"title": "Freela", "amount": "500", "date": "2024-02-20", "type": "income", "status": "pending"},
        {"title": "Aluguel", "amount": "1200", "date": "2024-02-05", "type": "expense", "status": "paid"},
        {"title": "Luz", "amount": "100", "date": "2024-02-25", "type": "expense", "status": "unpaid"},
        {"title": "Tesouro", "amount": "400", "date": "2024-02-10", "type": "investment", "status": "invested"},
        {"title": "Viagem", "amount": "2000", "date": "2024-06-01", "type": "expense", "status": "unpaid"},
    ]
    ids = {}
    for row in rows:
        r = client.post("/transactions/", json=row, headers=headers)
        assert r.status_code == 201, r.text
        ids[row["title"]] = r.json()[0]["id"]
    return ids


def test_monthly_dashboard(client, auth_headers):
    seed(client, auth_headers)

    r = client.get("/dashboard/", params={"mode": "monthly", "reference": "2024-02-14"}, headers=auth_headers)
    assert r.status_code == 200
    body = r.json()
    totals = body["totals"]

    assert body["selection_range"]["label"] == "2024-02"
    assert body["consolidated_range"]["start"] == "2000-01-01"
    assert Decimal(totals["income_confirmed"]) == Decimal("3000")
    assert Decimal(totals["income_pending"]) == Decimal("500")
    assert Decimal(totals["expense_paid"]) == Decimal("1200")
    assert Decimal(totals["expense_pending"]) == Decimal("100")
    assert Decimal(totals["invested_total"]) == Decimal("400")
    assert Decimal(totals["projected_balance"]) == Decimal("2200")
    assert Decimal(totals["consolidated_balance"]) == Decimal("2800")
    assert len(totals["recent_transactions"]) == 5
    assert [p["date"] for p in totals["chart_series"]] == ["2024-02-01", "2024-02-05", "2024-02-20", "2024-02-25"]


def test_yearly_dashboard(client, auth_headers):
    seed(client, auth_headers)
    r = client.get("/dashboard/", params={"mode": "yearly", "reference": "2024-07-01"}, headers=auth_headers)
    totals = r.json()["totals"]

    assert Decimal(totals["expense_pending"]) == Decimal("2100")
    assert Decimal(totals["consolidated_balance"]) == Decimal("2800")


def test_empty_dashboard_is_all_zero(client, auth_headers):
    r = client.get("/dashboard/", params={"reference": "2024-02-14"}, headers=auth_headers)
    totals = r.json()["totals"]
    assert Decimal(totals["projected_balance"]) == 0
    assert totals["recent_transactions"] == []
    assert totals["chart_series"] == []


def test_cached_dashboard_follows_local_edits(client, auth_headers):
    assert client.get("/dashboard/cached", headers=auth_headers).status_code == 404

    ids = seed(client, auth_headers)
    client.get("/dashboard/", params={"reference": "2024-02-14"}, headers=auth_headers)

    client.put(f"/transactions/{ids['Luz']}", headers=auth_headers, json={
        "title": "Luz", "amount": "100", "date": "2024-02-25", "type": "expense", "status": "paid",
    })
    totals = client.get("/dashboard/cached", headers=auth_headers).json()["totals"]
    assert Decimal(totals["expense_paid"]) == Decimal("1300")
    assert Decimal(totals["expense_pending"]) == 0

    client.delete(f"/transactions/{ids['Salário fev']}", headers=auth_headers)
    totals = client.get("/dashboard/cached", headers=auth_headers).json()["totals"]
    assert Decimal(totals["income_confirmed"]) == 0


def test_navigation(client, auth_headers):
    r = client.get("/dashboard/navigate", params={"direction": 1, "mode": "monthly", "reference": "2024-01-31"},
                   headers=auth_headers)
    assert r.json()["reference"] == "2024-02-29"
    assert r.json()["can_navigate"] is True

    r = client.get("/dashboard/navigate", params={"direction": -1, "mode": "allTime", "reference": "2024-01-31"},
                   headers=auth_headers)
    assert r.json()["reference"] == "2024-01-31"
    assert r.json()["can_navigate"] is False

    r = client.get("/dashboard/navigate", params={"direction": 2, "reference": "2024-01-31"}, headers=auth_headers)
    assert r.status_code == 400


@pytest.mark.parametrize("amount, expected", [("1000", "0"), ("300", "700")])
def test_invested_income_is_subtracted_once(client, auth_headers, amount, expected):
    r = client.post("/transactions/", headers=auth_headers, json={
        "title": "Salário", "amount": "1000", "date": "2024-02-05", "type": "income", "status": "received",
    })
    income_id = r.json()[0]["id"]
    params = {"mode": "monthly", "reference": "2024-02-14"}

    before = client.get("/dashboard/", params=params, headers=auth_headers).json()["totals"]
    assert Decimal(before["projected_balance"]) == Decimal("1000")

    r = client.post(f"/transactions/{income_id}/invest", headers=auth_headers,
                    json={"amount": amount, "date": "2024-02-10"})
    assert r.status_code == 201

    cached = client.get("/dashboard/cached", headers=auth_headers).json()["totals"]
    fresh = client.get("/dashboard/", params=params, headers=auth_headers).json()["totals"]
    for totals in (cached, fresh):
        assert Decimal(totals["income_confirmed"]) == Decimal("1000")
        assert Decimal(totals["invested_total"]) == Decimal(amount)
        assert Decimal(totals["projected_balance"]) == Decimal(expected)
        assert Decimal(totals["consolidated_balance"]) == Decimal(expected)
