"""
Tests for the HTTP surface: sale admin endpoints and product pricing.
"""
from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from sale_engine.api.deps import access_security, get_db
from sale_engine.main import app
from sale_engine.models import User, UserRole


@pytest.fixture
def client(engine):
    def override_get_db():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin(session):
    user = User(email="admin@example.com", first_name="Admin", role=UserRole.ADMIN)
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def auth_headers(user):
    token = access_security.create_access_token(subject={"id": user.id})
    return {"Authorization": f"Bearer {token}"}


class TestSaleAdmin:
    """Tests for /api/sales admin endpoints."""

    def test_requires_authentication(self, client):
        response = client.post("/api/sales/", json={"name": "X", "discount_amount": "-0.1"})

        assert response.status_code == 401

    def test_customer_is_forbidden(self, client, customer):
        response = client.get("/api/sales/", headers=auth_headers(customer))

        assert response.status_code == 403

    def test_create_and_read(self, client, admin, product, wholesale_group):
        response = client.post(
            "/api/sales/",
            json={
                "name": "Wholesale ten",
                "discount_type": "percent",
                "discount_amount": "-0.10",
                "user_group_ids": [wholesale_group.id],
                "purchasable_ids": [product.id],
            },
            headers=auth_headers(admin),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["id"] is not None
        assert data["all_groups"] is False
        assert data["all_categories"] is True
        assert data["all_purchasables"] is False
        assert data["purchasable_ids"] == [product.id]

        listed = client.get("/api/sales/", headers=auth_headers(admin)).json()
        assert [sale["id"] for sale in listed] == [data["id"]]

        single = client.get(f"/api/sales/{data['id']}", headers=auth_headers(admin))
        assert single.json()["user_group_ids"] == [wholesale_group.id]

    def test_invalid_sale_returns_field_errors(self, client, admin):
        response = client.post(
            "/api/sales/",
            json={"name": "Markup", "discount_type": "flat", "discount_amount": "5.00"},
            headers=auth_headers(admin),
        )

        assert response.status_code == 422
        assert "discount_amount" in response.json()["errors"]

    def test_update_missing_sale_is_404(self, client, admin):
        response = client.put(
            "/api/sales/999",
            json={"name": "Ghost", "discount_amount": "-0.10"},
            headers=auth_headers(admin),
        )

        assert response.status_code == 404

    def test_unknown_purchasable_is_404(self, client, admin):
        response = client.post(
            "/api/sales/",
            json={"name": "Ghost item", "discount_amount": "-0.10", "purchasable_ids": [999]},
            headers=auth_headers(admin),
        )

        assert response.status_code == 404

    def test_delete(self, client, admin):
        created = client.post(
            "/api/sales/",
            json={"name": "Short lived", "discount_amount": "-0.10"},
            headers=auth_headers(admin),
        ).json()

        first = client.delete(f"/api/sales/{created['id']}", headers=auth_headers(admin))
        second = client.delete(f"/api/sales/{created['id']}", headers=auth_headers(admin))

        assert first.status_code == 200
        assert second.status_code == 404


class TestProductPrice:
    """Tests for /api/products/{id}/price."""

    def create_sale(self, client, admin, **payload):
        response = client.post("/api/sales/", json=payload, headers=auth_headers(admin))
        assert response.status_code == 200
        return response.json()

    def test_stacked_sales(self, client, admin, product):
        first = self.create_sale(client, admin, name="Flat", discount_type="flat", discount_amount="-20.00")
        second = self.create_sale(client, admin, name="Percent", discount_type="percent", discount_amount="-0.10")

        response = client.get(f"/api/products/{product.id}/price")

        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["price"]) == Decimal("100.00")
        assert Decimal(data["sale_price"]) == Decimal("70.00")
        assert data["discount_percent"] == 30
        assert data["sale_ids"] == [first["id"], second["id"]]

    def test_group_sale_needs_matching_user(self, client, admin, product, customer, wholesale_group):
        self.create_sale(
            client, admin,
            name="Wholesale", discount_type="percent", discount_amount="-0.25",
            user_group_ids=[wholesale_group.id],
        )

        anonymous = client.get(f"/api/products/{product.id}/price").json()
        member = client.get(f"/api/products/{product.id}/price", headers=auth_headers(customer)).json()
        other = client.get(f"/api/products/{product.id}/price", headers=auth_headers(admin)).json()

        assert Decimal(anonymous["sale_price"]) == Decimal("100.00")
        assert Decimal(member["sale_price"]) == Decimal("75.00")
        assert Decimal(other["sale_price"]) == Decimal("100.00")

    def test_completed_order_uses_order_date(self, client, admin, product, customer, completed_order):
        self.create_sale(
            client, admin,
            name="New", discount_type="flat", discount_amount="-10.00",
            date_from=(datetime.utcnow() - timedelta(days=1)).isoformat(),
        )

        today = client.get(f"/api/products/{product.id}/price", headers=auth_headers(customer)).json()
        ordered = client.get(
            f"/api/products/{product.id}/price",
            params={"order_id": completed_order.id},
            headers=auth_headers(customer),
        ).json()

        assert Decimal(today["sale_price"]) == Decimal("90.00")
        assert Decimal(ordered["sale_price"]) == Decimal("100.00")

    def test_foreign_order_is_hidden(self, client, product, completed_order):
        response = client.get(f"/api/products/{product.id}/price", params={"order_id": completed_order.id})

        assert response.status_code == 404

    def test_not_promotable_product(self, client, admin, session, product):
        self.create_sale(client, admin, name="All", discount_type="percent", discount_amount="-0.50")
        product.is_promotable = False
        session.add(product)
        session.commit()

        data = client.get(f"/api/products/{product.id}/price").json()

        assert Decimal(data["sale_price"]) == Decimal("100.00")
        assert data["sale_ids"] == []

    def test_price_follows_admin_changes(self, client, admin, product):
        url = f"/api/products/{product.id}/price"
        before = client.get(url).json()

        created = self.create_sale(client, admin, name="Half", discount_type="percent", discount_amount="-0.50")
        after_create = client.get(url).json()
        single = client.get(f"/api/sales/{created['id']}", headers=auth_headers(admin))

        deleted = client.delete(f"/api/sales/{created['id']}", headers=auth_headers(admin))
        after_delete = client.get(url).json()

        assert Decimal(before["sale_price"]) == Decimal("100.00")
        assert Decimal(after_create["sale_price"]) == Decimal("50.00")
        assert after_create["sale_ids"] == [created["id"]]
        assert single.status_code == 200
        assert deleted.status_code == 200
        assert Decimal(after_delete["sale_price"]) == Decimal("100.00")
        assert after_delete["sale_ids"] == []

    def test_disabled_sale_stops_applying(self, client, admin, product):
        url = f"/api/products/{product.id}/price"
        created = self.create_sale(client, admin, name="Quarter", discount_type="percent", discount_amount="-0.25")
        assert Decimal(client.get(url).json()["sale_price"]) == Decimal("75.00")

        response = client.put(
            f"/api/sales/{created['id']}",
            json={"name": "Quarter", "discount_type": "percent", "discount_amount": "-0.25", "enabled": False},
            headers=auth_headers(admin),
        )

        assert response.status_code == 200
        assert Decimal(client.get(url).json()["sale_price"]) == Decimal("100.00")

    def test_unknown_product(self, client):
        assert client.get("/api/products/999/price").status_code == 404


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
