"""
SonicVision Testing Configuration
Pytest fixtures and test setup
"""
import sys
from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

# Add src to Python path
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from sonicvision.core.constants import GenerationStatus  # noqa: E402
from sonicvision.database.connection import DatabaseManager  # noqa: E402
from sonicvision.database.storage import DatabaseStorage  # noqa: E402
from sonicvision.player.media import MediaEvent, MediaEventTarget  # noqa: E402


class FakeMediaElement(MediaEventTarget):
    """In-memory media element; the test drives its events"""

    def __init__(self, duration: float = 0.0):
        super().__init__()
        self.src = ""
        self.duration = duration
        self.volume = 1.0
        self._current_time = 0.0
        self.play_error = None
        self.load_calls = 0
        self.play_calls = 0
        self.pause_calls = 0

    @property
    def current_time(self) -> float:
        return self._current_time

    @current_time.setter
    def current_time(self, value: float) -> None:
        # Real elements clamp to the loaded media
        upper = self.duration if self.duration else value
        self._current_time = min(max(value, 0.0), upper)

    def load(self) -> None:
        self.load_calls += 1
        self.dispatch_event(MediaEvent.LOAD_START)

    async def play(self) -> None:
        self.play_calls += 1
        if self.play_error is not None:
            raise self.play_error

    def pause(self) -> None:
        self.pause_calls += 1


def make_image(
    id: str = "img-1",
    status=GenerationStatus.COMPLETED.value,
    image_url="https://cdn.example.com/img-1.png",
    title="Sunset",
    created_at: datetime = None
):
    """Lightweight image record with the attributes the gallery reads"""
    return SimpleNamespace(
        id=id,
        status=status,
        image_url=image_url,
        title=title,
        prompt="a sunset over the sea",
        created_at=created_at or datetime(2026, 1, 1)
    )


@pytest.fixture
def media():
    return FakeMediaElement(duration=180.0)


@pytest.fixture
def image_factory():
    return make_image


@pytest.fixture
def gallery_images():
    """Twelve displayable images: three pages at five per page"""
    return [
        make_image(id=f"img-{i}", image_url=f"https://cdn.example.com/{i}.png", title=f"Image {i}")
        for i in range(12)
    ]


@pytest.fixture
async def db_manager(tmp_path):
    """File-backed SQLite database with all tables created"""
    manager = DatabaseManager(f"sqlite+aiosqlite:///{tmp_path / 'sonicvision_test.db'}")
    await manager.initialize()
    await manager.create_tables()
    yield manager
    await manager.close()


@pytest.fixture
async def storage(db_manager):
    return DatabaseStorage(db_manager.session_factory)


@pytest.fixture
def music_request_data():
    """Music generation request body"""
    return {
        "prompt": "An upbeat synthwave track about night drives",
        "style": "synthwave, retro",
        "title": "Night Drive",
        "model": "V4_5",
        "instrumental": False
    }


def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: mark test as unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as integration test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )
