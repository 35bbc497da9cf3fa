"""The Valkey cache dependency degrades to no cache when Valkey is down."""

import pytest

from collabhive.config import settings
from collabhive.db import valkey
from collabhive.main import app


@pytest.fixture
def valkey_down(monkeypatch):
    async def unreachable():
        raise ConnectionError("valkey unavailable")

    monkeypatch.setattr(valkey, "get_valkey_client", unreachable)
    monkeypatch.setattr(settings, "cache_enabled", True)


async def test_get_cache_returns_none_when_valkey_is_down(valkey_down):
    assert await valkey.get_cache() is None


async def test_get_cache_disabled(monkeypatch):
    monkeypatch.setattr(settings, "cache_enabled", False)

    assert await valkey.get_cache() is None


async def test_project_endpoints_work_without_valkey(
    valkey_down, test_client, profile_factory, project_factory, auth_headers
):
    app.dependency_overrides.pop(valkey.get_cache, None)
    ada = await profile_factory("Ada")
    bob = await profile_factory("Bob")
    project = await project_factory(ada, name="Api")

    details = await test_client.get(f"/api/v1/projects/{project.id}")
    search = await test_client.get("/api/v1/projects")
    favorite = await test_client.patch(
        f"/api/v1/projects/{project.id}", headers=auth_headers(bob.id)
    )

    assert details.status_code == 200
    assert details.json()["name"] == "Api"
    assert [p["name"] for p in search.json()] == ["Api"]
    assert favorite.status_code == 200
