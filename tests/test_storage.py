"""
Integration tests for the SQLAlchemy storage layer
Runs against a temporary SQLite database
"""
from datetime import datetime

import pytest

from sonicvision.database.repositories import ConflictError
from sonicvision.database.schemas import (
    ImageGenerationCreate,
    MusicGenerationCreate,
    MusicGenerationUpdate,
    UserCreate,
)


@pytest.mark.integration
class TestUserStorage:

    async def test_create_and_get_user(self, storage):
        user = await storage.create_user(UserCreate(username="ava"))

        assert len(user.id) == 36
        assert user.created_at is not None
        assert (await storage.get_user(user.id)).username == "ava"
        assert (await storage.get_user_by_username("ava")).id == user.id

    async def test_unknown_user(self, storage):
        assert await storage.get_user("missing") is None
        assert await storage.get_user_by_username("nobody") is None

    async def test_duplicate_username(self, storage):
        await storage.create_user(UserCreate(username="ava"))

        with pytest.raises(ConflictError):
            await storage.create_user(UserCreate(username="ava"))


@pytest.mark.integration
class TestMusicGenerationStorage:

    async def test_create_applies_defaults(self, storage):
        record = await storage.create_music_generation(
            MusicGenerationCreate(prompt="  ambient piano  ", style="", title="")
        )

        assert record.prompt == "ambient piano"
        assert record.status == "pending"
        assert record.model == "V5"
        assert record.instrumental is False
        assert record.style is None
        assert record.title is None
        assert record.duration is None
        assert record.task_id is None
        assert record.audio_url is None
        assert record.generation_metadata is None
        assert record.user_id is None
        assert record.created_at is not None
        assert record.completed_at is None

    async def test_create_keeps_zero_duration(self, storage):
        record = await storage.create_music_generation(
            MusicGenerationCreate.model_construct(prompt="ambient piano", model="V5", duration=0)
        )

        assert record.duration == 0

    async def test_get_unknown_returns_none(self, storage):
        assert await storage.get_music_generation("missing") is None
        assert await storage.get_music_generation_by_task_id("task-x") is None

    async def test_update(self, storage):
        record = await storage.create_music_generation(MusicGenerationCreate(prompt="jazz trio"))

        updated = await storage.update_music_generation(record.id, {
            "status": "processing",
            "task_id": "task-1",
        })
        assert updated.status == "processing"
        assert updated.task_id == "task-1"

        updated = await storage.update_music_generation(record.id, MusicGenerationUpdate(
            status="completed",
            audio_url="https://cdn.example.com/a.mp3",
            generation_metadata={"provider_status": "SUCCESS"}
        ))
        assert updated.status == "completed"
        assert updated.audio_url == "https://cdn.example.com/a.mp3"
        assert updated.task_id == "task-1"

        reloaded = await storage.get_music_generation(record.id)
        assert reloaded.generation_metadata == {"provider_status": "SUCCESS"}
        assert (await storage.get_music_generation_by_task_id("task-1")).id == record.id

    async def test_update_unknown_returns_none(self, storage):
        assert await storage.update_music_generation("missing", {"status": "failed"}) is None

    async def test_list_newest_first_with_limit(self, storage):
        ids = []
        for day in (1, 3, 2):
            record = await storage.create_music_generation(MusicGenerationCreate(prompt=f"day {day}"))
            await storage.update_music_generation(record.id, {"created_at": datetime(2026, 5, day)})
            ids.append(record.id)

        listed = await storage.get_user_music_generations()
        assert [record.prompt for record in listed] == ["day 3", "day 2", "day 1"]

        limited = await storage.get_user_music_generations(limit=2)
        assert [record.prompt for record in limited] == ["day 3", "day 2"]

    async def test_list_filters_by_owner(self, storage):
        owner = await storage.create_user(UserCreate(username="owner"))
        other = await storage.create_user(UserCreate(username="other"))

        mine = await storage.create_music_generation(MusicGenerationCreate(prompt="mine"), user_id=owner.id)
        await storage.create_music_generation(MusicGenerationCreate(prompt="theirs"), user_id=other.id)

        listed = await storage.get_user_music_generations(user_id=owner.id)

        assert [record.id for record in listed] == [mine.id]
        assert len(await storage.get_user_music_generations()) == 2


@pytest.mark.integration
class TestImageGenerationStorage:

    async def test_create_paired_image(self, storage):
        music = await storage.create_music_generation(MusicGenerationCreate(prompt="rock anthem"))

        image = await storage.create_image_generation(ImageGenerationCreate(
            prompt="album cover", title="Anthem", music_generation_id=music.id
        ))

        assert image.status == "pending"
        assert image.music_generation_id == music.id
        assert image.image_url is None

    async def test_update_and_list(self, storage):
        first = await storage.create_image_generation(ImageGenerationCreate(prompt="first"))
        second = await storage.create_image_generation(ImageGenerationCreate(prompt="second"))
        await storage.update_image_generation(first.id, {"created_at": datetime(2026, 1, 1)})
        await storage.update_image_generation(second.id, {"created_at": datetime(2026, 1, 2)})

        updated = await storage.update_image_generation(first.id, {
            "status": "completed",
            "image_url": "https://cdn.example.com/first.png"
        })

        assert updated.status == "completed"
        assert [image.prompt for image in await storage.get_user_image_generations()] == ["second", "first"]
        assert await storage.get_image_generation("missing") is None
        assert await storage.update_image_generation("missing", {"status": "failed"}) is None
