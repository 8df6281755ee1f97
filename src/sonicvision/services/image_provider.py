"""
Image Provider for SonicVision Visual Generation
Synchronous image generation through the OpenAI Images HTTP API
"""

from dataclasses import dataclass
from typing import Optional

import httpx

from ..core.result import Result


@dataclass
class ImagePayload:
    """Downloaded image bytes"""
    content: bytes
    content_type: str


class ImageProvider:
    """OpenAI Images provider (DALL-E 3)"""

    GENERATIONS_PATH = "/v1/images/generations"
    DEFAULT_CONTENT_TYPE = "image/png"

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com",
        model: str = "dall-e-3",
        size: str = "1024x1024",
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.model = model
        self.size = size
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def is_initialized(self) -> bool:
        return self._client is not None

    async def initialize(self) -> Result[None]:
        """Initialize the image API client"""
        if not self.api_key:
            return Result.err("OpenAI API key is required")

        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "User-Agent": "SonicVision/0.1"
                }
            )

        return Result.ok(None)

    async def generate(self, prompt: str) -> Result[str]:
        """Generate one image and return its hosted URL"""
        if not self._client:
            return Result.err("Image client not initialized. Call initialize() first.")

        payload = {
            "model": self.model,
            "prompt": prompt,
            "n": 1,
            "size": self.size,
        }

        try:
            response = await self._client.post(self.GENERATIONS_PATH, json=payload)

            if response.status_code != 200:
                error_msg = f"Image API error: {response.status_code}"
                try:
                    error_body = response.json()
                except ValueError:
                    error_body = None
                error_data = error_body.get("error") if isinstance(error_body, dict) else None
                if isinstance(error_data, dict) and error_data.get("message"):
                    error_msg += f" - {error_data['message']}"
                elif error_body is None:
                    error_msg += f" - {response.text}"
                return Result.err(error_msg)

            try:
                body = response.json()
            except ValueError:
                return Result.err("Invalid image API response: body is not JSON")

            if not isinstance(body, dict):
                return Result.err("Invalid image API response: body is not an object")

            images = body.get("data")
            first = images[0] if isinstance(images, list) and images else None
            url = first.get("url") if isinstance(first, dict) else None
            if not url or not isinstance(url, str):
                return Result.err("Invalid image API response: missing url")

            return Result.ok(url)

        except httpx.RequestError as e:
            return Result.err(f"Image API request failed: {e}")

    async def fetch(self, url: str) -> Result[ImagePayload]:
        """Download image bytes from a hosted URL"""
        if not self._client:
            return Result.err("Image client not initialized. Call initialize() first.")

        try:
            # Hosted URLs are pre-signed; the API key must not be forwarded
            request = self._client.build_request("GET", url)
            request.headers.pop("Authorization", None)
            response = await self._client.send(request)

            if response.status_code != 200:
                return Result.err(f"Failed to download image: {response.status_code}")

            content_type = response.headers.get("content-type", self.DEFAULT_CONTENT_TYPE)
            return Result.ok(ImagePayload(
                content=response.content,
                content_type=content_type.split(";")[0].strip()
            ))

        except (httpx.RequestError, httpx.InvalidURL) as e:
            return Result.err(f"Image download failed: {e}")

    async def cleanup(self) -> None:
        """Clean up resources"""
        if self._client:
            await self._client.aclose()
            self._client = None
