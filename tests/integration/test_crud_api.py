"""
Integration tests for the default CRUD endpoints (/user).

Tests:
- find one / many / page with where conditions and ordering
- create, update, delete committing their changes
- body binding failures and the missing WHERE guard
- database errors surfaced through the envelope
"""

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from bitcrud.core.config import settings
from bitcrud.example.models import User

from tests.factories import UserFactory


async def count_users(db: AsyncSession, *clauses) -> int:
    result = await db.execute(select(func.count()).select_from(User).where(*clauses))
    return result.scalar_one()


class TestFindOne:
    @pytest.mark.asyncio
    async def test_find_by_where(self, client):
        response = await client.post("/user/r/find/one", json={"where": [["id", "=", 3]]})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "Stuart"
        assert data["age"] == 27

    @pytest.mark.asyncio
    async def test_first_in_requested_order(self, client):
        response = await client.post(
            "/user/r/find/one",
            json={"where": [["department", "=", "IT"]], "order": {"age": "desc"}},
        )

        assert response.json()["data"]["name"] == "Harold"

    @pytest.mark.asyncio
    async def test_empty_body_returns_first_by_primary_key(self, client):
        response = await client.post("/user/r/find/one")

        assert response.json()["data"]["id"] == 1

    @pytest.mark.asyncio
    async def test_not_found(self, client):
        response = await client.post("/user/r/find/one", json={"where": [["id", "=", 999]]})

        assert response.status_code == 404
        assert response.json() == {"error": 1, "msg": "record not found"}


class TestFindMany:
    @pytest.mark.asyncio
    async def test_defaults_to_primary_key_order(self, client):
        response = await client.post("/user/r/find/many", json={})

        assert response.status_code == 200
        assert [row["id"] for row in response.json()["data"]] == list(range(1, 11))

    @pytest.mark.asyncio
    async def test_conditions_and_multi_field_order(self, client):
        response = await client.post(
            "/user/r/find/many",
            json={
                "where": [["gender", "=", "Female"], ["age", ">=", 28]],
                "order": {"department": "asc", "age": "desc"},
            },
        )

        names = [row["name"] for row in response.json()["data"]]
        assert names == ["Max", "Joanna", "Nora", "Marcia", "Eileen"]

    @pytest.mark.asyncio
    async def test_in_operator(self, client):
        response = await client.post(
            "/user/r/find/many",
            json={"where": [["name", "in", ["Kain", "Nora"]]]},
        )

        assert [row["id"] for row in response.json()["data"]] == [1, 10]

    @pytest.mark.asyncio
    async def test_like_operator(self, client):
        response = await client.post(
            "/user/r/find/many",
            json={"where": [["name", "like", "V%"]]},
        )

        assert [row["name"] for row in response.json()["data"]] == ["Vanessa", "Vivianne"]

    @pytest.mark.asyncio
    async def test_unknown_field_rejected(self, client):
        response = await client.post(
            "/user/r/find/many",
            json={"where": [["salary", ">", 1]]},
        )

        assert response.status_code == 400
        assert response.json() == {"error": 1, "msg": "unknown field 'salary'"}

    @pytest.mark.asyncio
    async def test_unknown_operator_rejected(self, client):
        response = await client.post(
            "/user/r/find/many",
            json={"where": [["age", "~", 1]]},
        )

        assert response.status_code == 400
        assert "unsupported operator" in response.json()["msg"]

    @pytest.mark.asyncio
    async def test_invalid_order_direction_rejected(self, client):
        response = await client.post("/user/r/find/many", json={"order": {"id": "up"}})

        assert response.status_code == 400
        assert response.json()["error"] == 1

    @pytest.mark.asyncio
    async def test_invalid_json_rejected(self, client):
        response = await client.post(
            "/user/r/find/many",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["msg"].startswith("invalid JSON body")

    @pytest.mark.asyncio
    async def test_non_object_body_rejected(self, client):
        response = await client.post("/user/r/find/many", json=[1, 2])

        assert response.status_code == 400
        assert response.json() == {"error": 1, "msg": "request body must be a JSON object"}


class TestFindPage:
    @pytest.mark.asyncio
    async def test_second_page(self, client):
        response = await client.post(
            "/user/r/find/page",
            json={"page": {"index": 2, "limit": 3}},
        )

        data = response.json()["data"]
        assert data["total"] == 10
        assert [row["id"] for row in data["lists"]] == [4, 5, 6]

    @pytest.mark.asyncio
    async def test_total_counts_filtered_rows(self, client):
        response = await client.post(
            "/user/r/find/page",
            json={
                "where": [["department", "=", "IT"]],
                "order": {"id": "desc"},
                "page": {"index": 1, "limit": 2},
            },
        )

        data = response.json()["data"]
        assert data["total"] == 3
        assert [row["id"] for row in data["lists"]] == [9, 3]

    @pytest.mark.asyncio
    async def test_limit_above_maximum_rejected(self, client):
        response = await client.post(
            "/user/r/find/page",
            json={"page": {"index": 1, "limit": settings.pagination.max_limit + 1}},
        )

        assert response.status_code == 400


class TestCreate:
    @pytest.mark.asyncio
    async def test_create_commits(self, client, db_session: AsyncSession):
        response = await client.post(
            "/user/w/create",
            json=UserFactory.payload(name="Zhang", age=27, gender="Male"),
        )

        assert response.status_code == 200
        assert response.json() == {"error": 0, "msg": "ok"}
        assert await count_users(db_session, User.name == "Zhang") == 1

    @pytest.mark.asyncio
    async def test_missing_field_rejected(self, client, db_session: AsyncSession):
        payload = UserFactory.payload(name="Zhang")
        del payload["age"]

        response = await client.post("/user/w/create", json=payload)

        assert response.status_code == 400
        assert "age" in response.json()["msg"]
        assert await count_users(db_session, User.name == "Zhang") == 0

    @pytest.mark.asyncio
    async def test_duplicate_email_is_database_error(self, client, db_session: AsyncSession):
        response = await client.post(
            "/user/w/create",
            json=UserFactory.payload(name="Other", email="Kain@VX.com"),
        )

        assert response.status_code == 500
        assert response.json()["error"] == 1
        assert await count_users(db_session, User.email == "Kain@VX.com") == 1
        assert await count_users(db_session, User.name == "Other") == 0


class TestUpdate:
    @pytest.mark.asyncio
    async def test_update_commits(self, client, db_session: AsyncSession):
        response = await client.post(
            "/user/w/update",
            json={"where": [["name", "=", "Stuart"]], "updates": {"age": 25}},
        )

        assert response.json() == {"error": 0, "msg": "ok"}
        result = await db_session.execute(select(User.age).where(User.name == "Stuart"))
        assert result.scalar_one() == 25

    @pytest.mark.asyncio
    async def test_update_all_matching_rows(self, client, db_session: AsyncSession):
        await client.post(
            "/user/w/update",
            json={"where": [["department", "=", "IT"]], "updates": {"department": "Ops"}},
        )

        assert await count_users(db_session, User.department == "Ops") == 3
        assert await count_users(db_session, User.department == "IT") == 0

    @pytest.mark.asyncio
    async def test_without_where_refused(self, client, db_session: AsyncSession):
        response = await client.post("/user/w/update", json={"updates": {"age": 1}})

        assert response.status_code == 400
        assert response.json() == {"error": 1, "msg": "WHERE conditions required"}
        assert await count_users(db_session, User.age == 1) == 0

    @pytest.mark.asyncio
    async def test_unknown_update_field_rejected(self, client):
        response = await client.post(
            "/user/w/update",
            json={"where": [["id", "=", 1]], "updates": {"salary": 1}},
        )

        assert response.status_code == 400
        assert response.json()["msg"] == "unknown field 'salary'"

    @pytest.mark.asyncio
    async def test_update_value_type_checked(self, client):
        response = await client.post(
            "/user/w/update",
            json={"where": [["id", "=", 1]], "updates": {"age": "old"}},
        )

        assert response.status_code == 400
        assert response.json()["msg"].startswith("updates.age")

    @pytest.mark.asyncio
    async def test_update_value_constraints_checked(self, client, db_session: AsyncSession):
        response = await client.post(
            "/user/w/update",
            json={"where": [["id", "=", 3]], "updates": {"age": -5}},
        )

        assert response.status_code == 400
        assert response.json()["msg"].startswith("updates.age")
        result = await db_session.execute(select(User.age).where(User.id == 3))
        assert result.scalar_one() == 27

    @pytest.mark.asyncio
    async def test_update_length_constraints_checked(self, client, db_session: AsyncSession):
        response = await client.post(
            "/user/w/update",
            json={"where": [["id", "=", 3]], "updates": {"name": "x" * 200}},
        )

        assert response.status_code == 400
        assert response.json()["msg"].startswith("updates.name")
        assert await count_users(db_session, User.name == "Stuart") == 1

    @pytest.mark.asyncio
    async def test_empty_updates_rejected(self, client):
        response = await client.post(
            "/user/w/update",
            json={"where": [["id", "=", 1]], "updates": {}},
        )

        assert response.status_code == 400


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_commits(self, client, db_session: AsyncSession):
        response = await client.post(
            "/user/w/delete",
            json={"where": [["name", "=", "Joanna"]]},
        )

        assert response.json() == {"error": 0, "msg": "ok"}
        assert await count_users(db_session, User.name == "Joanna") == 0
        assert await count_users(db_session) == 9

    @pytest.mark.asyncio
    async def test_without_where_refused(self, client, db_session: AsyncSession):
        response = await client.post("/user/w/delete", json={})

        assert response.status_code == 400
        assert response.json()["msg"] == "WHERE conditions required"
        assert await count_users(db_session) == 10


class TestApplication:
    @pytest.mark.asyncio
    async def test_correlation_id_echoed(self, client):
        response = await client.post(
            "/user/r/find/one",
            json={},
            headers={"X-Correlation-ID": "abc-123"},
        )

        assert response.headers["X-Correlation-ID"] == "abc-123"

    @pytest.mark.asyncio
    async def test_correlation_id_generated(self, client):
        response = await client.post("/user/r/find/one", json={})

        assert response.headers["X-Correlation-ID"]

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
