"""
SonicVision Image Gallery
Paginated carousel state over completed image generations, plus download/share actions
"""

import math
import os
import re
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Protocol, Sequence, Tuple, Union

import structlog

from ..core.constants import IMAGES_PER_PAGE, GenerationStatus

logger = structlog.get_logger("sonicvision.player")

DEFAULT_IMAGE_FILENAME = "generated-image"
DEFAULT_SHARE_TITLE = "AI Generated Image"
SHARE_TEXT = "Check out this AI-generated image from SonicVision Studio"


def is_displayable(image: Any) -> bool:
    """Completed and carrying an image URL"""
    status = getattr(image, "status", None)
    if isinstance(status, GenerationStatus):
        status = status.value
    return status == GenerationStatus.COMPLETED.value and bool(getattr(image, "image_url", None))


class ImageGallery:
    """
    Selection and page bookkeeping for the gallery carousel.

    Only displayable records are indexed. The selected index is global
    (page offset + position in page), so the page shown and the image shown
    large are independent.
    """

    def __init__(self, images: Sequence[Any] = (), page_size: int = IMAGES_PER_PAGE):
        if page_size < 1:
            raise ValueError("page_size must be positive")

        self.page_size = page_size
        self.selected_index = 0
        self.current_page = 0
        self._images: List[Any] = []
        self.update_images(images)

    @property
    def images(self) -> List[Any]:
        """Displayable records in their original order"""
        return list(self._images)

    @property
    def total_pages(self) -> int:
        return math.ceil(len(self._images) / self.page_size)

    @property
    def is_empty(self) -> bool:
        return not self._images

    @property
    def selected_image(self) -> Optional[Any]:
        if 0 <= self.selected_index < len(self._images):
            return self._images[self.selected_index]
        return None

    @property
    def visible_thumbnails(self) -> List[Tuple[int, Any]]:
        """(global index, record) pairs on the current page"""
        start = self.current_page * self.page_size
        page = self._images[start:start + self.page_size]
        return [(start + offset, image) for offset, image in enumerate(page)]

    @property
    def page_indicators(self) -> List[bool]:
        """One flag per page, True for the current one"""
        return [index == self.current_page for index in range(self.total_pages)]

    @property
    def show_carousel_controls(self) -> bool:
        return self.total_pages > 1

    def update_images(self, images: Sequence[Any]) -> None:
        """Replace the records, keeping the selection when it is still in range"""
        self._images = [image for image in images if is_displayable(image)]

        if self._images and self.selected_index >= len(self._images):
            self.selected_index = 0
        if self.total_pages and self.current_page >= self.total_pages:
            self.current_page = 0

    def next_page(self) -> None:
        if self.total_pages:
            self.current_page = (self.current_page + 1) % self.total_pages

    def prev_page(self) -> None:
        if self.total_pages:
            self.current_page = (self.current_page - 1 + self.total_pages) % self.total_pages

    def select_thumbnail(self, index_in_page: int) -> Any:
        """Select a thumbnail on the current page and return its record"""
        visible = self.visible_thumbnails
        if not 0 <= index_in_page < len(visible):
            raise IndexError(f"No thumbnail {index_in_page} on page {self.current_page}")

        self.selected_index = self.current_page * self.page_size + index_in_page
        return visible[index_in_page][1]

    def is_selected(self, global_index: int) -> bool:
        return global_index == self.selected_index


class ImageDownloader(Protocol):
    async def download_image(self, image_id: str) -> bytes: ...


class ShareSheet(Protocol):
    """Native share sheet"""

    def is_available(self) -> bool: ...

    async def share(self, title: str, text: str, url: str) -> None: ...


class Clipboard(Protocol):
    async def write_text(self, text: str) -> None: ...


def download_filename(image: Any) -> str:
    """<title>.png with path separators and reserved characters replaced"""
    title = (getattr(image, "title", None) or DEFAULT_IMAGE_FILENAME).strip()
    safe = re.sub(r'[\\/:*?"<>|\x00-\x1f]+', "-", title).strip(". ") or DEFAULT_IMAGE_FILENAME
    return f"{safe}.png"


@dataclass
class GalleryActions:
    """Download and share side effects; failures are logged, never raised"""

    downloader: ImageDownloader
    downloads_dir: Union[str, Path]
    share_sheet: Optional[ShareSheet] = None
    clipboard: Optional[Clipboard] = None

    async def download(self, image: Any) -> Optional[Path]:
        """Fetch the image through the download endpoint and save it locally"""
        image_id = getattr(image, "id", None)
        if not image_id:
            return None

        try:
            content = await self.downloader.download_image(str(image_id))
        except Exception as e:
            logger.error("Download error", image_id=str(image_id), error=str(e))
            return None

        directory = Path(self.downloads_dir)
        temp_path: Optional[str] = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(dir=directory, suffix=".part")
            with os.fdopen(fd, "wb") as handle:
                handle.write(content)

            target = directory / download_filename(image)
            os.replace(temp_path, target)
            temp_path = None
            logger.info("Image downloaded", image_id=str(image_id), path=str(target))
            return target

        except OSError as e:
            logger.error("Download error", image_id=str(image_id), error=str(e))
            return None

        finally:
            if temp_path and os.path.exists(temp_path):
                os.unlink(temp_path)

    async def share(self, image: Any) -> bool:
        """Share via the native sheet when available, else copy the URL"""
        url = getattr(image, "image_url", None)
        if not url:
            return False

        if self.share_sheet is not None and self.share_sheet.is_available():
            try:
                await self.share_sheet.share(
                    title=getattr(image, "title", None) or DEFAULT_SHARE_TITLE,
                    text=SHARE_TEXT,
                    url=url
                )
                return True
            except Exception as e:
                logger.error("Share error", error=str(e))
                return False

        if self.clipboard is None:
            logger.warning("No share target available", url=url)
            return False

        try:
            await self.clipboard.write_text(url)
            return True
        except Exception as e:
            logger.error("Copy error", error=str(e))
            return False
