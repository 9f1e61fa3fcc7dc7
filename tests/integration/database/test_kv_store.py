"""Integration tests for the key-value store and its repositories."""

from datetime import datetime, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.profile import Company, Profile
from infrastructure.database.kv_store import SQLAlchemyKVStore
from infrastructure.database.repositories.kv_company_repo import KVCompanyRepository
from infrastructure.database.repositories.kv_profile_repo import KVProfileRepository


def _profile(user_id: str, **overrides) -> Profile:
    fields = {
        "id": user_id,
        "name": "Jane Doe",
        "email": "jane.doe@acmeco.com",
        "role": "employee",
        "company_name": "Acme Co",
        "created_at": datetime(2026, 1, 28, 10, 0, tzinfo=timezone.utc),
    }
    fields.update(overrides)
    return Profile(**fields)


class TestKVStore:
    @pytest.mark.asyncio
    async def test_set_then_get(self, db_session: AsyncSession):
        store = SQLAlchemyKVStore(db_session)

        await store.set("k1", {"a": 1})

        assert await store.get("k1") == {"a": 1}

    @pytest.mark.asyncio
    async def test_set_replaces_value(self, db_session: AsyncSession):
        store = SQLAlchemyKVStore(db_session)
        await store.set("k1", {"a": 1, "b": 2})

        await store.set("k1", {"a": 3})

        assert await store.get("k1") == {"a": 3}

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, db_session: AsyncSession):
        assert await SQLAlchemyKVStore(db_session).get("nope") is None

    @pytest.mark.asyncio
    async def test_prefix_scan_is_literal(self, db_session: AsyncSession):
        store = SQLAlchemyKVStore(db_session)
        await store.set("user_profile:1", {"id": "1"})
        await store.set("user_profile:2", {"id": "2"})
        await store.set("userXprofile:3", {"id": "3"})
        await store.set("company:Acme Co", {"name": "Acme Co"})

        values = await store.get_by_prefix("user_profile:")

        assert sorted(v["id"] for v in values) == ["1", "2"]


class TestKVProfileRepository:
    @pytest.mark.asyncio
    async def test_round_trip_preserves_every_field(self, db_session: AsyncSession):
        repo = KVProfileRepository(db_session)
        profile = _profile("u1", manager_id="m1", temp_password="tempabc123")

        await repo.save(profile)

        assert await repo.get("u1") == profile

    @pytest.mark.asyncio
    async def test_absent_optionals_not_stored(self, db_session: AsyncSession):
        repo = KVProfileRepository(db_session)
        await repo.save(_profile("u1"))

        raw = await SQLAlchemyKVStore(db_session).get("user_profile:u1")

        assert raw is not None
        assert "tempPassword" not in raw
        assert "managerId" not in raw
        assert raw["companyName"] == "Acme Co"

    @pytest.mark.asyncio
    async def test_list_all_ignores_companies(self, db_session: AsyncSession):
        repo = KVProfileRepository(db_session)
        await repo.save(_profile("u1"))
        await repo.save(_profile("u2", role="manager"))
        await KVCompanyRepository(db_session).save(Company(name="Acme Co", admin_id="u1"))

        profiles = await repo.list_all()

        assert sorted(p.id for p in profiles) == ["u1", "u2"]

    @pytest.mark.asyncio
    async def test_clearing_temp_password_persists(self, db_session: AsyncSession):
        repo = KVProfileRepository(db_session)
        profile = _profile("u1", temp_password="tempabc123")
        await repo.save(profile)

        profile.temp_password = None
        await repo.save(profile)

        stored = await repo.get("u1")
        assert stored is not None
        assert stored.temp_password is None


class TestKVCompanyRepository:
    @pytest.mark.asyncio
    async def test_stores_camel_case_record(self, db_session: AsyncSession):
        repo = KVCompanyRepository(db_session)
        company = Company(
            name="Acme Co",
            admin_id="u1",
            created_at=datetime(2026, 1, 28, tzinfo=timezone.utc),
        )

        await repo.save(company)

        raw = await SQLAlchemyKVStore(db_session).get("company:Acme Co")
        assert raw == {
            "name": "Acme Co",
            "adminId": "u1",
            "createdAt": "2026-01-28T00:00:00+00:00",
        }
