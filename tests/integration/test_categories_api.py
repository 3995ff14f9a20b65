# -*- coding: utf-8 -*-
"""
Test Categories API (SQL store)
"""


def test_defaults_listed_without_investment(client, auth_headers):
    r = client.get("/categories/", headers=auth_headers)
    ids = [c["id"] for c in r.json()]

    assert r.status_code == 200
    assert "salary" in ids and "food" in ids
    assert "investment" not in ids


def test_investment_defaults_only_on_request(client, auth_headers):
    r = client.get("/categories/", params={"type": "investment"}, headers=auth_headers)
    assert [c["id"] for c in r.json()] == ["investment"]


def test_create_filter_and_delete(client, auth_headers, other_auth_headers):
    r = client.post("/categories/", json={"name": "  Pets ", "type": "expense", "icon": "pawprint"},
                    headers=auth_headers)
    assert r.status_code == 201
    created = r.json()
    assert created["name"] == "Pets"
    assert created["is_system"] is False

    expense_names = [c["name"] for c in client.get("/categories/", params={"type": "expense"},
                                                   headers=auth_headers).json()]
    income_names = [c["name"] for c in client.get("/categories/", params={"type": "income"},
                                                  headers=auth_headers).json()]
    assert "Pets" in expense_names
    assert "Pets" not in income_names

    other_names = [c["name"] for c in client.get("/categories/", headers=other_auth_headers).json()]
    assert "Pets" not in other_names

    assert client.delete(f"/categories/{created['id']}", headers=other_auth_headers).status_code == 404
    assert client.delete(f"/categories/{created['id']}", headers=auth_headers).status_code == 204


def test_duplicate_and_blank_names_are_rejected(client, auth_headers):
    r = client.post("/categories/", json={"name": "alimentação", "type": "expense"}, headers=auth_headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "Categoria já existe"

    # mesmo nome em outro tipo é permitido
    r = client.post("/categories/", json={"name": "Alimentação", "type": "income"}, headers=auth_headers)
    assert r.status_code == 201

    r = client.post("/categories/", json={"name": "   ", "type": "expense"}, headers=auth_headers)
    assert r.status_code == 400


def test_system_categories_cannot_be_deleted(client, auth_headers):
    assert client.delete("/categories/salary", headers=auth_headers).status_code == 400
