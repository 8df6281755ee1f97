"""
Suno Provider for SonicVision Music Generation
Task-based music generation through the Suno HTTP API
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from ..core.constants import GenerationStatus
from ..core.logging import generation_logger
from ..core.result import Result


@dataclass
class ProviderTaskStatus:
    """Snapshot of a provider task"""
    task_id: str
    status: GenerationStatus
    provider_status: str
    audio_url: Optional[str] = None
    image_url: Optional[str] = None
    title: Optional[str] = None
    duration: Optional[int] = None
    error: Optional[str] = None
    raw: Optional[Dict[str, Any]] = None


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _whole_seconds(value: Any) -> Optional[int]:
    """Provider durations are float seconds; anything else is dropped"""
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        return None
    return int(round(value))


class SunoProvider:
    """Suno API provider for music generation"""

    GENERATE_PATH = "/api/v1/generate"
    RECORD_INFO_PATH = "/api/v1/generate/record-info"
    CREDITS_PATH = "/api/v1/generate/credit"

    # Provider task states that map onto record statuses
    SUCCESS_STATES = {"SUCCESS"}
    FAILED_STATES = {
        "CREATE_TASK_FAILED",
        "GENERATE_AUDIO_FAILED",
        "CALLBACK_EXCEPTION",
        "SENSITIVE_WORD_ERROR",
    }

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.sunoapi.org",
        callback_url: str = "",
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.callback_url = callback_url
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def is_initialized(self) -> bool:
        return self._client is not None

    async def initialize(self) -> Result[None]:
        """Initialize Suno API client"""
        if not self.api_key:
            return Result.err("Suno API key is required")

        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                    "User-Agent": "SonicVision/0.1"
                }
            )

        return Result.ok(None)

    async def submit(
        self,
        prompt: str,
        model: str,
        style: Optional[str] = None,
        title: Optional[str] = None,
        instrumental: bool = False
    ) -> Result[str]:
        """Submit a generation task and return the provider task id"""
        if not self._client:
            return Result.err("Suno client not initialized. Call initialize() first.")

        # Custom mode is required whenever style or title are supplied
        custom_mode = bool(style or title)
        payload: Dict[str, Any] = {
            "prompt": prompt,
            "customMode": custom_mode,
            "instrumental": instrumental,
            "model": model,
            "callBackUrl": self.callback_url,
        }
        if custom_mode:
            payload["style"] = style or ""
            payload["title"] = title or ""

        try:
            response = await self._client.post(self.GENERATE_PATH, json=payload)
            body = self._parse_body(response)
            if body.is_err():
                return Result.err(body.error)

            task_id = _as_dict(body.data.get("data")).get("taskId")
            if not task_id or not isinstance(task_id, str):
                return Result.err("Invalid Suno API response: missing taskId")

            return Result.ok(task_id)

        except httpx.RequestError as e:
            return Result.err(f"Suno API request failed: {e}")

    async def get_status(self, task_id: str) -> Result[ProviderTaskStatus]:
        """Fetch the current state of a generation task"""
        if not self._client:
            return Result.err("Suno client not initialized. Call initialize() first.")

        try:
            response = await self._client.get(self.RECORD_INFO_PATH, params={"taskId": task_id})
            body = self._parse_body(response)
            if body.is_err():
                return Result.err(body.error)

            return Result.ok(self._to_task_status(task_id, _as_dict(body.data.get("data"))))

        except httpx.RequestError as e:
            return Result.err(f"Suno API request failed: {e}")

    async def get_credits_remaining(self) -> Result[int]:
        """Get remaining API credits"""
        if not self._client:
            return Result.err("Suno client not initialized. Call initialize() first.")

        try:
            response = await self._client.get(self.CREDITS_PATH)
            body = self._parse_body(response)
            if body.is_err():
                return Result.err(body.error)

            try:
                return Result.ok(int(body.data.get("data") or 0))
            except (TypeError, ValueError):
                return Result.err("Invalid Suno API response: credits is not a number")

        except httpx.RequestError as e:
            return Result.err(f"Credits check failed: {e}")

    def _parse_body(self, response: httpx.Response) -> Result[Dict[str, Any]]:
        """Validate HTTP status and the envelope's own code field"""
        if response.status_code != 200:
            return Result.err(f"Suno API error: {response.status_code} - {response.text}")

        try:
            body = response.json()
        except ValueError:
            return Result.err("Invalid Suno API response: body is not JSON")

        if not isinstance(body, dict):
            return Result.err("Invalid Suno API response: body is not an object")

        if body.get("code", 200) != 200:
            return Result.err(f"Suno API error: {body.get('code')} - {body.get('msg', 'unknown error')}")

        return Result.ok(body)

    def _to_task_status(self, task_id: str, data: Dict[str, Any]) -> ProviderTaskStatus:
        provider_status = str(data.get("status") or "PENDING").upper()

        if provider_status in self.SUCCESS_STATES:
            status = GenerationStatus.COMPLETED
        elif provider_status in self.FAILED_STATES:
            status = GenerationStatus.FAILED
        else:
            status = GenerationStatus.PROCESSING

        tracks = _as_dict(data.get("response")).get("sunoData")
        first = _as_dict(tracks[0]) if isinstance(tracks, list) and tracks else {}

        error = data.get("errorMessage") or None
        if status == GenerationStatus.FAILED and not error:
            error = f"Provider reported {provider_status}"

        audio_url = first.get("audioUrl") or None
        if status == GenerationStatus.COMPLETED and not audio_url:
            # A success without a playable URL is not usable
            status = GenerationStatus.FAILED
            error = "Provider returned no audio URL"

        duration = first.get("duration")

        task_status = ProviderTaskStatus(
            task_id=task_id,
            status=status,
            provider_status=provider_status,
            audio_url=audio_url,
            image_url=first.get("imageUrl") or None,
            title=first.get("title") or None,
            duration=_whole_seconds(duration),
            error=error,
            raw=data
        )

        if status.is_terminal:
            generation_logger.logger.debug(
                "Suno task settled",
                task_id=task_id,
                provider_status=provider_status
            )

        return task_status

    async def cleanup(self) -> None:
        """Clean up resources"""
        if self._client:
            await self._client.aclose()
            self._client = None
