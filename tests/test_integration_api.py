"""
HTTP tests for the marketplace API.
Exercises complete workflows through the routers, dependencies and error handlers.
"""

import pytest
import uuid
from datetime import date
from httpx import AsyncClient

from app.models.user import User
from app.models.property import Property
from tests.conftest import auth_headers, TEST_PASSWORD


PROPERTY_PAYLOAD = {
    "title": "Lakeside Cottage",
    "description": "Two storeys with a view of the lake",
    "property_type": "house",
    "price": 300000,
    "address": "1 Shore Road",
    "city": "Lakeview",
    "state": "MI",
    "zip_code": "49001",
    "bedrooms": 3,
    "bathrooms": 2,
    "square_feet": 1600
}


def assert_error(response, status_code: int, code: str):
    assert response.status_code == status_code
    error = response.json()["error"]
    assert error["code"] == code
    assert error["message"]
    assert error["timestamp"].endswith("Z")
    assert error["request_id"]
    return error


async def property_status(client: AsyncClient, property_id: str) -> str:
    response = await client.get(f"/api/v1/properties/{property_id}")
    assert response.status_code == 200
    return response.json()["status"]


class TestAuthEndpoints:

    @pytest.mark.asyncio
    async def test_register_login_and_me(self, async_client: AsyncClient):
        register = await async_client.post("/api/v1/auth/register", json={
            "email": "new.seller@example.com",
            "password": "password123",
            "first_name": "New",
            "last_name": "Seller",
            "role": "seller"
        })
        assert register.status_code == 201
        body = register.json()
        assert body["message"] == "User created successfully"
        assert body["user"]["role"] == "seller"

        login = await async_client.post("/api/v1/auth/login", json={
            "email": "new.seller@example.com",
            "password": "password123"
        })
        assert login.status_code == 200
        assert login.json()["message"] == "Login successful"
        assert login.json()["user"]["id"] == body["user"]["id"]

        me = await async_client.get(
            "/api/v1/auth/me",
            headers={"Authorization": f"Bearer {login.json()['token']}"}
        )
        assert me.status_code == 200
        assert me.json()["user"]["email"] == "new.seller@example.com"
        assert "hashed_password" not in me.json()["user"]

    @pytest.mark.asyncio
    async def test_register_admin(self, async_client: AsyncClient):
        response = await async_client.post("/api/v1/auth/register", json={
            "email": "boss@example.com",
            "password": "password123",
            "first_name": "Boss",
            "last_name": "Person",
            "role": "admin"
        })

        assert response.status_code == 201
        assert response.json()["user"]["role"] == "admin"

        stats = await async_client.get(
            "/api/v1/users/stats", headers={"Authorization": f"Bearer {response.json()['token']}"}
        )
        assert stats.status_code == 200

    @pytest.mark.asyncio
    async def test_register_short_password(self, async_client: AsyncClient):
        response = await async_client.post("/api/v1/auth/register", json={
            "email": "short@example.com",
            "password": "short",
            "first_name": "Short",
            "last_name": "Password"
        })

        error = assert_error(response, 422, "VALIDATION_ERROR")
        assert any("password" in detail["field"] for detail in error["details"])

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, async_client: AsyncClient, test_buyer: User):
        response = await async_client.post("/api/v1/auth/login", json={
            "email": "buyer@example.com",
            "password": "wrongpassword"
        })

        assert_error(response, 401, "UNAUTHORIZED")

    @pytest.mark.asyncio
    async def test_login_fixture_user(self, async_client: AsyncClient, test_buyer: User):
        response = await async_client.post("/api/v1/auth/login", json={
            "email": "buyer@example.com",
            "password": TEST_PASSWORD
        })

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_me_requires_token(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/auth/me")

        error = assert_error(response, 401, "UNAUTHORIZED")
        assert error["message"] == "Authentication token required"

    @pytest.mark.asyncio
    async def test_me_rejects_bad_token(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/auth/me", headers={"Authorization": "Bearer garbage"})

        assert_error(response, 401, "UNAUTHORIZED")


class TestPropertyEndpoints:

    @pytest.mark.asyncio
    async def test_listing_is_public(self, async_client: AsyncClient, test_property: Property):
        response = await async_client.get("/api/v1/properties")

        assert response.status_code == 200
        listings = response.json()
        assert len(listings) == 1
        assert listings[0]["seller"]["email"] == "seller@example.com"

    @pytest.mark.asyncio
    async def test_get_property_is_repeatable(self, async_client: AsyncClient, test_property: Property):
        first = await async_client.get(f"/api/v1/properties/{test_property.id}")
        second = await async_client.get(f"/api/v1/properties/{test_property.id}")

        assert first.status_code == 200
        assert first.json() == second.json()

    @pytest.mark.asyncio
    async def test_get_missing_property(self, async_client: AsyncClient):
        response = await async_client.get(f"/api/v1/properties/{uuid.uuid4()}")

        assert_error(response, 404, "NOT_FOUND")

    @pytest.mark.asyncio
    async def test_invalid_price_range(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/properties", params={"min_price": 500, "max_price": 100})

        assert_error(response, 400, "VALIDATION_ERROR")

    @pytest.mark.asyncio
    async def test_invalid_status_filter(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/properties", params={"status": "demolished"})

        assert_error(response, 422, "VALIDATION_ERROR")

    @pytest.mark.asyncio
    async def test_create_requires_authentication(self, async_client: AsyncClient):
        response = await async_client.post("/api/v1/properties", json=PROPERTY_PAYLOAD)

        assert_error(response, 401, "UNAUTHORIZED")

    @pytest.mark.asyncio
    async def test_buyer_cannot_create(self, async_client: AsyncClient, test_buyer: User):
        response = await async_client.post(
            "/api/v1/properties", json=PROPERTY_PAYLOAD, headers=auth_headers(test_buyer)
        )

        assert_error(response, 403, "FORBIDDEN")

    @pytest.mark.asyncio
    async def test_create_missing_fields(self, async_client: AsyncClient, test_seller: User):
        response = await async_client.post(
            "/api/v1/properties", json={"title": "No address"}, headers=auth_headers(test_seller)
        )

        assert_error(response, 422, "VALIDATION_ERROR")

    @pytest.mark.asyncio
    async def test_owner_updates_and_deletes(self, async_client: AsyncClient, test_seller: User):
        headers = auth_headers(test_seller)
        created = await async_client.post("/api/v1/properties", json=PROPERTY_PAYLOAD, headers=headers)
        assert created.status_code == 201
        property_id = created.json()["property_id"]

        updated = await async_client.put(
            f"/api/v1/properties/{property_id}", json={"price": 280000}, headers=headers
        )
        assert updated.json() == {"message": "Property updated successfully"}

        fetched = await async_client.get(f"/api/v1/properties/{property_id}")
        assert fetched.json()["price"] == 280000.0
        assert fetched.json()["title"] == "Lakeside Cottage"

        deleted = await async_client.delete(f"/api/v1/properties/{property_id}", headers=headers)
        assert deleted.json() == {"message": "Property deleted successfully"}

        missing = await async_client.get(f"/api/v1/properties/{property_id}")
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_other_seller_cannot_update(self, async_client: AsyncClient, other_seller: User, test_property: Property):
        response = await async_client.put(
            f"/api/v1/properties/{test_property.id}", json={"price": 1}, headers=auth_headers(other_seller)
        )

        assert_error(response, 403, "FORBIDDEN")

    @pytest.mark.asyncio
    async def test_empty_update_is_rejected(self, async_client: AsyncClient, test_seller: User, test_property: Property):
        response = await async_client.put(
            f"/api/v1/properties/{test_property.id}", json={}, headers=auth_headers(test_seller)
        )

        assert_error(response, 422, "VALIDATION_ERROR")


class TestSaleWorkflow:

    @pytest.mark.asyncio
    async def test_completed_sale_marks_property_sold(
        self, async_client: AsyncClient, test_seller: User, test_buyer: User, test_admin: User
    ):
        created = await async_client.post(
            "/api/v1/properties", json=PROPERTY_PAYLOAD, headers=auth_headers(test_seller)
        )
        property_id = created.json()["property_id"]
        assert await property_status(async_client, property_id) == "available"

        sale = await async_client.post(
            "/api/v1/sales",
            json={"property_id": property_id, "sale_price": 300000},
            headers=auth_headers(test_buyer)
        )
        assert sale.status_code == 201
        assert sale.json()["message"] == "Sale created successfully"
        sale_id = sale.json()["sale_id"]

        assert await property_status(async_client, property_id) == "pending"
        detail = await async_client.get(f"/api/v1/sales/{sale_id}", headers=auth_headers(test_buyer))
        assert detail.json()["status"] == "pending"
        assert detail.json()["seller_id"] == str(test_seller.id)
        assert detail.json()["property_title"] == "Lakeside Cottage"

        completed = await async_client.put(
            f"/api/v1/sales/{sale_id}", json={"status": "completed"}, headers=auth_headers(test_admin)
        )
        assert completed.json() == {"message": "Sale updated successfully"}
        assert await property_status(async_client, property_id) == "sold"

        sold = await async_client.get("/api/v1/properties", params={"status": "sold"})
        assert [p["id"] for p in sold.json()] == [property_id]

        available = await async_client.get("/api/v1/properties", params={"status": "available"})
        assert property_id not in [p["id"] for p in available.json()]

    @pytest.mark.asyncio
    async def test_cancelled_sale_reopens_property(
        self, async_client: AsyncClient, test_buyer: User, other_buyer: User, test_property: Property
    ):
        property_id = str(test_property.id)

        sale = await async_client.post(
            "/api/v1/sales",
            json={"property_id": property_id, "sale_price": 290000},
            headers=auth_headers(test_buyer)
        )
        sale_id = sale.json()["sale_id"]

        blocked = await async_client.post(
            "/api/v1/sales",
            json={"property_id": property_id, "sale_price": 310000},
            headers=auth_headers(other_buyer)
        )
        error = assert_error(blocked, 400, "CONFLICT")
        assert error["message"] == "Property not available for sale"

        cancelled = await async_client.put(
            f"/api/v1/sales/{sale_id}", json={"status": "cancelled"}, headers=auth_headers(test_buyer)
        )
        assert cancelled.status_code == 200
        assert await property_status(async_client, property_id) == "available"

        retry = await async_client.post(
            "/api/v1/sales",
            json={"property_id": property_id, "sale_price": 310000},
            headers=auth_headers(other_buyer)
        )
        assert retry.status_code == 201
        assert await property_status(async_client, property_id) == "pending"

    @pytest.mark.asyncio
    async def test_sale_on_missing_property(self, async_client: AsyncClient, test_buyer: User):
        response = await async_client.post(
            "/api/v1/sales",
            json={"property_id": str(uuid.uuid4()), "sale_price": 1000},
            headers=auth_headers(test_buyer)
        )

        assert_error(response, 400, "CONFLICT")

    @pytest.mark.asyncio
    async def test_seller_cannot_buy(self, async_client: AsyncClient, test_seller: User, test_property: Property):
        response = await async_client.post(
            "/api/v1/sales",
            json={"property_id": str(test_property.id), "sale_price": 1000},
            headers=auth_headers(test_seller)
        )

        assert_error(response, 403, "FORBIDDEN")

    @pytest.mark.asyncio
    async def test_non_positive_price(self, async_client: AsyncClient, test_buyer: User, test_property: Property):
        response = await async_client.post(
            "/api/v1/sales",
            json={"property_id": str(test_property.id), "sale_price": 0},
            headers=auth_headers(test_buyer)
        )

        assert_error(response, 422, "VALIDATION_ERROR")

    @pytest.mark.asyncio
    async def test_unknown_sale_status(self, async_client: AsyncClient, test_admin: User):
        response = await async_client.put(
            f"/api/v1/sales/{uuid.uuid4()}", json={"status": "archived"}, headers=auth_headers(test_admin)
        )

        assert_error(response, 422, "VALIDATION_ERROR")

    @pytest.mark.asyncio
    async def test_missing_sale(self, async_client: AsyncClient, test_admin: User):
        response = await async_client.get(f"/api/v1/sales/{uuid.uuid4()}", headers=auth_headers(test_admin))

        assert_error(response, 404, "NOT_FOUND")

    @pytest.mark.asyncio
    async def test_sales_list_and_stats(
        self, async_client: AsyncClient, test_buyer: User, other_buyer: User, test_seller: User,
        test_admin: User, test_property: Property
    ):
        sale = await async_client.post(
            "/api/v1/sales",
            json={"property_id": str(test_property.id), "sale_price": 100000},
            headers=auth_headers(test_buyer)
        )
        sale_id = sale.json()["sale_id"]
        await async_client.put(
            f"/api/v1/sales/{sale_id}", json={"status": "completed"}, headers=auth_headers(test_seller)
        )

        mine = await async_client.get("/api/v1/sales", headers=auth_headers(test_buyer))
        assert [s["id"] for s in mine.json()] == [sale_id]
        theirs = await async_client.get("/api/v1/sales", headers=auth_headers(other_buyer))
        assert theirs.json() == []

        forbidden = await async_client.get("/api/v1/sales/stats", headers=auth_headers(test_seller))
        assert_error(forbidden, 403, "FORBIDDEN")

        stats = await async_client.get("/api/v1/sales/stats", headers=auth_headers(test_admin))
        assert stats.status_code == 200
        assert stats.json() == {
            "total_sales": 1,
            "total_value": 100000.0,
            "pending_sales": 0,
            "monthly_sales": [{"month": date.today().month, "count": 1, "total_value": 100000.0}]
        }


class TestPaymentEndpoints:

    @pytest.fixture
    async def sale_id(self, async_client: AsyncClient, test_buyer: User, test_property: Property) -> str:
        response = await async_client.post(
            "/api/v1/sales",
            json={"property_id": str(test_property.id), "sale_price": 300000},
            headers=auth_headers(test_buyer)
        )
        return response.json()["sale_id"]

    @pytest.mark.asyncio
    async def test_payment_lifecycle(self, async_client: AsyncClient, test_buyer: User, test_admin: User, sale_id: str):
        created = await async_client.post(
            "/api/v1/payments",
            json={"sale_id": sale_id, "amount": 30000, "payment_type": "deposit", "payment_method": "wire"},
            headers=auth_headers(test_buyer)
        )
        assert created.status_code == 201
        payment_id = created.json()["payment_id"]

        listed = await async_client.get(f"/api/v1/payments/sale/{sale_id}", headers=auth_headers(test_buyer))
        assert [p["id"] for p in listed.json()] == [payment_id]
        assert listed.json()[0]["status"] == "pending"

        updated = await async_client.put(
            f"/api/v1/payments/{payment_id}", json={"status": "completed"}, headers=auth_headers(test_admin)
        )
        assert updated.json() == {"message": "Payment updated successfully"}

        everything = await async_client.get("/api/v1/payments", headers=auth_headers(test_admin))
        assert everything.status_code == 200
        payment = everything.json()[0]
        assert payment["status"] == "completed"
        assert payment["sale_price"] == 300000.0
        assert payment["buyer_first_name"] == "Bea"

    @pytest.mark.asyncio
    async def test_outsider_cannot_pay(self, async_client: AsyncClient, other_buyer: User, sale_id: str):
        response = await async_client.post(
            "/api/v1/payments", json={"sale_id": sale_id, "amount": 100}, headers=auth_headers(other_buyer)
        )

        assert_error(response, 403, "FORBIDDEN")

    @pytest.mark.asyncio
    async def test_payment_for_missing_sale(self, async_client: AsyncClient, test_buyer: User):
        response = await async_client.post(
            "/api/v1/payments", json={"sale_id": str(uuid.uuid4()), "amount": 100}, headers=auth_headers(test_buyer)
        )

        assert_error(response, 404, "NOT_FOUND")

    @pytest.mark.asyncio
    async def test_unknown_payment_update_succeeds(self, async_client: AsyncClient, test_admin: User):
        response = await async_client.put(
            f"/api/v1/payments/{uuid.uuid4()}", json={"status": "refunded"}, headers=auth_headers(test_admin)
        )

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_buyer_cannot_list_all(self, async_client: AsyncClient, test_buyer: User):
        response = await async_client.get("/api/v1/payments", headers=auth_headers(test_buyer))

        assert_error(response, 403, "FORBIDDEN")


class TestUserEndpoints:

    @pytest.mark.asyncio
    async def test_admin_manages_users(self, async_client: AsyncClient, test_admin: User, test_buyer: User):
        headers = auth_headers(test_admin)

        users = await async_client.get("/api/v1/users", headers=headers)
        assert {u["email"] for u in users.json()} == {"admin@example.com", "buyer@example.com"}

        changed = await async_client.put(
            f"/api/v1/users/{test_buyer.id}/role", json={"role": "seller"}, headers=headers
        )
        assert changed.json() == {"message": "User role updated successfully"}

        stats = await async_client.get("/api/v1/users/stats", headers=headers)
        assert stats.json()["total_users"] == 2
        assert stats.json()["users_by_role"] == {"buyer": 0, "seller": 1, "admin": 1}

    @pytest.mark.asyncio
    async def test_invalid_role(self, async_client: AsyncClient, test_admin: User, test_buyer: User):
        response = await async_client.put(
            f"/api/v1/users/{test_buyer.id}/role", json={"role": "landlord"}, headers=auth_headers(test_admin)
        )

        error = assert_error(response, 400, "VALIDATION_ERROR")
        assert error["message"] == "Invalid role"

    @pytest.mark.asyncio
    async def test_unknown_user_role_change_is_a_no_op(self, async_client: AsyncClient, test_admin: User):
        headers = auth_headers(test_admin)
        response = await async_client.put(
            f"/api/v1/users/{uuid.uuid4()}/role", json={"role": "seller"}, headers=headers
        )

        assert response.status_code == 200
        assert response.json()["message"] == "User role updated successfully"

        stats = await async_client.get("/api/v1/users/stats", headers=headers)
        assert stats.json()["users_by_role"] == {"buyer": 0, "seller": 0, "admin": 1}

    @pytest.mark.asyncio
    async def test_non_admin_forbidden(self, async_client: AsyncClient, test_seller: User):
        response = await async_client.get("/api/v1/users", headers=auth_headers(test_seller))

        assert_error(response, 403, "FORBIDDEN")


class TestServiceEndpoints:

    @pytest.mark.asyncio
    async def test_root(self, async_client: AsyncClient):
        response = await async_client.get("/")

        assert response.status_code == 200
        assert response.json()["api_prefix"] == "/api/v1"

    @pytest.mark.asyncio
    async def test_health(self, async_client: AsyncClient):
        response = await async_client.get("/health")

        assert response.status_code == 200
        assert response.json()["database"] == "connected"

    @pytest.mark.asyncio
    async def test_unknown_route(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/nowhere")

        assert_error(response, 404, "HTTP_404")
