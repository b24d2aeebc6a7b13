"""Tests for the HTTP API."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from newswatch.api import create_app
from newswatch.models import GeopoliticalTags


@pytest.fixture
def stored(repository, content_store):
    """One offloaded article and one legacy article with an inline body."""
    key = content_store.put_text("Full body about China and Russia.", "Example")
    offloaded = repository.add(
        url="https://example.com/offloaded",
        title="Summit in Beijing",
        content="Full body about...",
        content_key=key,
        geopolitical_tags=GeopoliticalTags(countries=["China", "Russia"]),
    )
    legacy = repository.add(
        url="https://example.com/legacy",
        title="Old story",
        content="Legacy inline body.",
        source="Archive",
    )
    return offloaded, legacy


@pytest.fixture
def scheduler() -> MagicMock:
    mock = MagicMock()
    mock.trigger = AsyncMock(
        return_value={"success": True, "message": "Crawling completed: 1 new articles out of 2 found", "summary": None}
    )
    mock.stop = AsyncMock()
    return mock


@pytest.fixture
def client(repository, content_store, scheduler, stored):
    app = create_app(repository, content_store, scheduler=scheduler, signed_url_expiry=900)
    with TestClient(app) as test_client:
        yield test_client


class TestReadRoutes:
    """Tests for article read routes."""

    def test_health(self, client) -> None:
        assert client.get("/health").json() == {"ok": True}

    def test_list(self, client) -> None:
        response = client.get("/news")
        assert response.status_code == 200
        assert [a["url"] for a in response.json()] == [
            "https://example.com/offloaded",
            "https://example.com/legacy",
        ]

    def test_get_by_id(self, client, stored) -> None:
        offloaded, _ = stored
        response = client.get(f"/news/{offloaded.id}")
        assert response.status_code == 200
        assert response.json()["title"] == "Summit in Beijing"

    def test_get_missing(self, client) -> None:
        assert client.get("/news/999").status_code == 404

    def test_search(self, client) -> None:
        response = client.get("/news/search", params={"q": "summit"})
        assert [a["title"] for a in response.json()] == ["Summit in Beijing"]

    def test_by_source(self, client) -> None:
        response = client.get("/news/source/Archive")
        assert [a["title"] for a in response.json()] == ["Old story"]

    def test_by_country(self, client) -> None:
        response = client.get("/news/country/Russia")
        assert [a["title"] for a in response.json()] == ["Summit in Beijing"]

    def test_geopolitical(self, client) -> None:
        response = client.get("/news/geopolitical")
        assert [a["title"] for a in response.json()] == ["Summit in Beijing"]

    def test_statistics(self, client) -> None:
        assert client.get("/news/statistics").json()["total_articles"] == 2


class TestContentRoutes:
    """Tests for full-body retrieval."""

    def test_content_from_store(self, client, stored) -> None:
        offloaded, _ = stored
        response = client.get(f"/news/{offloaded.id}/content")
        assert response.json() == {"content": "Full body about China and Russia."}

    def test_content_inline_for_legacy(self, client, stored) -> None:
        _, legacy = stored
        response = client.get(f"/news/{legacy.id}/content")
        assert response.json() == {"content": "Legacy inline body."}

    def test_content_store_unavailable(self, client, content_store, stored) -> None:
        offloaded, _ = stored
        content_store.fail_gets = True
        assert client.get(f"/news/{offloaded.id}/content").status_code == 502

    def test_content_url(self, client, stored) -> None:
        offloaded, _ = stored
        response = client.get(f"/news/{offloaded.id}/content-url")
        assert response.status_code == 200
        body = response.json()
        assert body["expires_in"] == 900
        assert offloaded.content_key in body["url"]

    def test_content_url_legacy(self, client, stored) -> None:
        _, legacy = stored
        assert client.get(f"/news/{legacy.id}/content-url").status_code == 404

    def test_content_missing_article(self, client) -> None:
        assert client.get("/news/999/content").status_code == 404


class TestSchedulerRoutes:
    """Tests for the manual crawl trigger."""

    def test_trigger(self, client, scheduler) -> None:
        response = client.post("/scheduler/crawl")
        assert response.status_code == 200
        assert response.json()["success"] is True
        scheduler.trigger.assert_awaited_once()

    def test_lifespan_starts_scheduler(self, client, scheduler) -> None:
        scheduler.start.assert_called_once()

    def test_trigger_without_scheduler(self, repository, content_store) -> None:
        app = create_app(repository, content_store)
        with TestClient(app) as test_client:
            assert test_client.post("/scheduler/crawl").status_code == 503
