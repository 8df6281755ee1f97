"""
Test suite for the SonicVision REST API
Routes run against a temporary SQLite database with mocked providers
"""
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from sonicvision.api.dependencies import get_generation_service, get_storage
from sonicvision.core.config import SonicVisionSettings, get_settings
from sonicvision.core.constants import GenerationStatus
from sonicvision.core.result import Result
from sonicvision.database.schemas import ImageGenerationCreate, MusicGenerationCreate
from sonicvision.main import create_app
from sonicvision.services import (
    GenerationService,
    ImagePayload,
    ImageProvider,
    ProviderTaskStatus,
    SunoProvider,
)


@pytest.fixture
def music_provider():
    provider = AsyncMock(spec=SunoProvider)
    provider.initialize.return_value = Result.ok(None)
    provider.submit.return_value = Result.ok("task-1")
    provider.get_status.return_value = Result.ok(ProviderTaskStatus(
        task_id="task-1",
        status=GenerationStatus.COMPLETED,
        provider_status="SUCCESS",
        audio_url="https://cdn.test/a.mp3",
        duration=120
    ))
    return provider


@pytest.fixture
def image_provider():
    provider = AsyncMock(spec=ImageProvider)
    provider.initialize.return_value = Result.ok(None)
    provider.generate.return_value = Result.ok("https://img.test/cover.png")
    provider.fetch.return_value = Result.ok(ImagePayload(content=b"\x89PNG bytes", content_type="image/png"))
    return provider


@pytest.fixture
def service(storage, music_provider, image_provider):
    return GenerationService(
        storage=storage,
        music_provider=music_provider,
        image_provider=image_provider,
        polling_interval=0.0,
        max_poll_attempts=2,
        sleep=AsyncMock()
    )


@pytest.fixture
async def client(storage, service):
    """Async client bound to an app whose dependencies use the test database"""
    app = create_app()
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_generation_service] = lambda: service

    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.mark.integration
class TestMusicAPI:
    """Test suite for music endpoints"""

    async def test_generate_music(self, client, music_request_data, music_provider):
        response = await client.post("/api/music/generate", json=music_request_data)

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "processing"
        assert data["title"] == "Night Drive"
        assert data["model"] == "V4_5"
        assert data["audio_url"] is None

        # Background polling settles the record
        record = (await client.get(f"/api/music/{data['id']}")).json()
        assert record["status"] == "completed"
        assert record["audio_url"] == "https://cdn.test/a.mp3"
        assert record["completed_at"] is not None
        music_provider.get_status.assert_awaited_with("task-1")

    async def test_generate_with_provider_failure(self, client, music_request_data, music_provider):
        music_provider.submit.return_value = Result.err("Suno API error: 401 - invalid key")

        response = await client.post("/api/music/generate", json=music_request_data)

        assert response.status_code == 201
        assert response.json()["status"] == "failed"
        assert "invalid key" in response.json()["error_message"]
        music_provider.get_status.assert_not_awaited()

    @pytest.mark.parametrize("body", [
        {"prompt": "   "},
        {"prompt": "x" * 5001},
        {"prompt": "ok", "model": "V9"},
        {"prompt": "ok", "duration": 0},
        {},
    ])
    async def test_generate_validation(self, client, body):
        response = await client.post("/api/music/generate", json=body)

        assert response.status_code == 422

    async def test_get_unknown_music(self, client):
        response = await client.get("/api/music/missing")

        assert response.status_code == 404
        assert "not found" in response.json()["detail"]

    async def test_list_music(self, client, storage):
        for prompt in ("one", "two", "three"):
            await storage.create_music_generation(MusicGenerationCreate(prompt=prompt))

        response = await client.get("/api/music", params={"limit": 2})

        assert response.status_code == 200
        assert len(response.json()) == 2

    async def test_list_music_by_owner(self, client):
        user = (await client.post("/api/users", json={"username": "owner"})).json()
        await client.post("/api/music/generate", json={"prompt": "mine"}, params={"user_id": user["id"]})
        await client.post("/api/music/generate", json={"prompt": "anyone"})

        response = await client.get("/api/music", params={"user_id": user["id"]})

        assert [item["prompt"] for item in response.json()] == ["mine"]
        assert response.json()[0]["user_id"] == user["id"]

    async def test_list_limit_bounds(self, client):
        assert (await client.get("/api/music", params={"limit": 0})).status_code == 422
        assert (await client.get("/api/music", params={"limit": 500})).status_code == 422

    async def test_refresh(self, client, storage, music_provider):
        record = await storage.create_music_generation(MusicGenerationCreate(prompt="x"))
        await storage.update_music_generation(record.id, {"status": "processing", "task_id": "task-1"})

        response = await client.post(f"/api/music/{record.id}/refresh")

        assert response.status_code == 200
        assert response.json()["status"] == "completed"

    async def test_refresh_unknown(self, client):
        assert (await client.post("/api/music/missing/refresh")).status_code == 404

    async def test_refresh_provider_error(self, client, storage, music_provider):
        record = await storage.create_music_generation(MusicGenerationCreate(prompt="x"))
        await storage.update_music_generation(record.id, {"status": "processing", "task_id": "task-1"})
        music_provider.get_status.return_value = Result.err("Suno API error: 503 - busy")

        response = await client.post(f"/api/music/{record.id}/refresh")

        assert response.status_code == 502
        assert "busy" in response.json()["detail"]

    async def test_provider_callback(self, client, storage):
        record = await storage.create_music_generation(MusicGenerationCreate(prompt="x"))
        await storage.update_music_generation(record.id, {"status": "processing", "task_id": "task-1"})

        response = await client.post("/api/music/callback", json={
            "code": 200,
            "data": {"callbackType": "complete", "task_id": "task-1", "data": []}
        })

        assert response.status_code == 200
        assert response.json() == {"received": True, "updated": True}
        assert (await storage.get_music_generation(record.id)).status == "completed"

    async def test_provider_callback_without_task(self, client):
        response = await client.post("/api/music/callback", json={"code": 200, "data": {}})

        assert response.status_code == 400


@pytest.mark.integration
class TestImagesAPI:
    """Test suite for image endpoints"""

    async def test_generate_image(self, client):
        response = await client.post("/api/images/generate", json={"prompt": "neon city", "title": "Neon"})

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "completed"
        assert data["image_url"] == "https://img.test/cover.png"

        listed = (await client.get("/api/images")).json()
        assert [item["id"] for item in listed] == [data["id"]]
        assert (await client.get(f"/api/images/{data['id']}")).json()["title"] == "Neon"

    async def test_generate_image_for_unknown_music(self, client):
        response = await client.post("/api/images/generate", json={
            "prompt": "cover", "music_generation_id": "missing"
        })

        assert response.status_code == 404

    async def test_paired_image_from_music_request(self, client, music_request_data):
        music_request_data["generate_image"] = True

        music = (await client.post("/api/music/generate", json=music_request_data)).json()
        images = (await client.get("/api/images")).json()

        assert len(images) == 1
        assert images[0]["music_generation_id"] == music["id"]

    async def test_download_image(self, client, image_provider):
        image = (await client.post("/api/images/generate", json={"prompt": "neon city", "title": "Neon"})).json()

        response = await client.get(f"/api/images/{image['id']}/download")

        assert response.status_code == 200
        assert response.content == b"\x89PNG bytes"
        assert response.headers["content-type"] == "image/png"
        assert 'filename="Neon.png"' in response.headers["content-disposition"]
        assert response.headers["content-disposition"].startswith("attachment")
        image_provider.fetch.assert_awaited_once_with("https://img.test/cover.png")

    async def test_download_non_ascii_title(self, client):
        image = (await client.post("/api/images/generate", json={"prompt": "p", "title": "Café Nuit"})).json()

        response = await client.get(f"/api/images/{image['id']}/download")

        assert response.status_code == 200
        assert "filename*=UTF-8''Caf%C3%A9%20Nuit.png" in response.headers["content-disposition"]

    async def test_download_unavailable_image(self, client, storage, image_provider):
        pending = await storage.create_image_generation(ImageGenerationCreate(prompt="p"))

        assert (await client.get("/api/images/missing/download")).status_code == 404
        assert (await client.get(f"/api/images/{pending.id}/download")).status_code == 404
        image_provider.fetch.assert_not_awaited()

    async def test_download_fetch_failure(self, client, image_provider):
        image = (await client.post("/api/images/generate", json={"prompt": "p"})).json()
        image_provider.fetch.return_value = Result.err("Failed to download image: 403")

        response = await client.get(f"/api/images/{image['id']}/download")

        assert response.status_code == 502

    async def test_get_unknown_image(self, client):
        assert (await client.get("/api/images/missing")).status_code == 404


@pytest.mark.integration
class TestUsersAPI:

    async def test_create_and_get_user(self, client):
        created = await client.post("/api/users", json={"username": "ava"})

        assert created.status_code == 201
        user_id = created.json()["id"]

        fetched = await client.get(f"/api/users/{user_id}")
        assert fetched.json()["username"] == "ava"

    async def test_duplicate_username(self, client):
        await client.post("/api/users", json={"username": "ava"})

        assert (await client.post("/api/users", json={"username": "ava"})).status_code == 409

    async def test_unknown_user(self, client):
        assert (await client.get("/api/users/missing")).status_code == 404


@pytest.mark.integration
class TestApplicationEndpoints:

    async def test_constants(self, client):
        data = (await client.get("/api/constants")).json()

        assert len(data["genres"]) == 15
        assert [model["value"] for model in data["models"]][0] == "V5"
        assert "Chill" in data["quick_tags"]
        assert data["generation_status"]["COMPLETED"] == "completed"
        assert data["polling_interval_ms"] == 2000
        assert data["max_prompt_length"] == 5000

    async def test_health(self, client):
        with patch("sonicvision.main.database_manager.check_health", AsyncMock(return_value=True)):
            response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["services"]["database"] == "healthy"

    async def test_health_degraded(self, client):
        with patch("sonicvision.main.database_manager.check_health", AsyncMock(return_value=False)):
            response = await client.get("/health")

        assert response.json()["status"] == "degraded"
        assert response.json()["services"]["database"] == "unhealthy"

    async def test_api_info(self, client):
        data = (await client.get("/api/info")).json()

        assert data["name"] == "SonicVision Studio"
        assert data["capabilities"]["music_generation"]
        assert data["limits"]["max_poll_attempts"] == 150


@pytest.mark.integration
class TestConfiguredLimits:
    """Prompt and list limits come from the application settings"""

    @pytest.fixture
    async def limited_client(self, storage, service, tmp_path):
        app_settings = SonicVisionSettings(
            MAX_PROMPT_LENGTH=20,
            DEFAULT_LIST_LIMIT=2,
            DOWNLOADS_PATH=str(tmp_path / "downloads"),
            LOG_FILE_PATH=str(tmp_path / "logs" / "app.log")
        )
        app = create_app()
        app.dependency_overrides[get_storage] = lambda: storage
        app.dependency_overrides[get_generation_service] = lambda: service
        app.dependency_overrides[get_settings] = lambda: app_settings

        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
            yield client

    async def test_music_prompt_over_configured_limit(self, limited_client, music_provider):
        response = await limited_client.post("/api/music/generate", json={"prompt": "x" * 21})

        assert response.status_code == 422
        assert "20 characters" in response.json()["detail"]
        music_provider.submit.assert_not_awaited()

    async def test_image_prompt_over_configured_limit(self, limited_client, image_provider):
        response = await limited_client.post("/api/images/generate", json={"prompt": "x" * 21})

        assert response.status_code == 422
        image_provider.generate.assert_not_awaited()

    async def test_prompt_within_configured_limit(self, limited_client):
        response = await limited_client.post("/api/images/generate", json={"prompt": "x" * 20})

        assert response.status_code == 201

    async def test_default_list_limit(self, limited_client, storage):
        for prompt in ("one", "two", "three"):
            await storage.create_music_generation(MusicGenerationCreate(prompt=prompt))
            await storage.create_image_generation(ImageGenerationCreate(prompt=prompt))

        music = (await limited_client.get("/api/music")).json()
        images = (await limited_client.get("/api/images")).json()
        explicit = (await limited_client.get("/api/music", params={"limit": 3})).json()

        assert len(music) == 2
        assert len(images) == 2
        assert len(explicit) == 3
