# prompt_relay/core/media_client.py
"""
Image and video synthesis through the google-genai SDK.

Video generation is a long-running operation: the submit call only returns a
handle, which is polled on a fixed interval until the provider reports it done.
Polling is bounded by both an attempt count and a wall-clock timeout.
"""
import asyncio
import base64
import logging
import time
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

import requests
from google import genai
from google.genai import types

from prompt_relay.core.errors import ConfigurationError, GenerationError
from prompt_relay.models import InlineFile
from prompt_relay.utils.config import RelaySettings
from prompt_relay.utils.file_helpers import bytes_to_data_url, split_data_url

logger = logging.getLogger(__name__)

Sleeper = Callable[[float], Awaitable[Any]]


def get_genai_client(settings: RelaySettings) -> genai.Client:
    if not settings.has_credential:
        raise ConfigurationError("API_KEY is not configured on the server.")
    return genai.Client(
        api_key=settings.api_key,
        http_options=types.HttpOptions(timeout=settings.request_timeout_sec * 1000),
    )


# ----------------------------
# Image
# ----------------------------
async def generate_image(settings: RelaySettings, prompt: str, aspect_ratio: str) -> str:
    """Synthesize one PNG and return it as a data URL."""
    client = get_genai_client(settings)
    logger.info("Image: calling %s (aspect %s)", settings.image_model, aspect_ratio)
    response = await client.aio.models.generate_images(
        model=settings.image_model,
        prompt=prompt,
        config=types.GenerateImagesConfig(
            number_of_images=1,
            output_mime_type="image/png",
            aspect_ratio=aspect_ratio,
        ),
    )
    generated = getattr(response, "generated_images", None) or []
    image = generated[0].image if generated else None
    image_bytes = getattr(image, "image_bytes", None) if image is not None else None
    if not image_bytes:
        raise GenerationError("Could not generate image.")
    return bytes_to_data_url(image_bytes, "image/png")


# ----------------------------
# Video
# ----------------------------
class VideoJobState(str, Enum):
    SUBMITTED = "submitted"
    POLLING = "polling"
    COMPLETED = "completed"
    MATERIALIZED = "materialized"
    FAILED = "failed"


class VideoJob:
    """
    Tracks one video operation from submission to a materialized data URL.

    submitted -> polling ... -> completed -> materialized, or -> failed.
    """

    def __init__(self, settings: RelaySettings, client: Any, sleep: Optional[Sleeper] = None):
        self.settings = settings
        self.client = client
        self.sleep = sleep or asyncio.sleep
        self.state: Optional[VideoJobState] = None
        self.operation: Any = None
        self.polls = 0

    def _transition(self, state: VideoJobState) -> None:
        logger.debug("Video job %s -> %s", self.state.value if self.state else "new", state.value)
        self.state = state

    def _fail(self, message: str) -> GenerationError:
        self._transition(VideoJobState.FAILED)
        return GenerationError(message)

    async def submit(self, prompt: str, seed_image: Optional[InlineFile] = None) -> None:
        kwargs = {
            "model": self.settings.video_model,
            "prompt": prompt,
            "config": types.GenerateVideosConfig(number_of_videos=1),
        }
        image = _seed_image(seed_image)
        if image is not None:
            kwargs["image"] = image
        logger.info("Video: submitting to %s (seed image: %s)", self.settings.video_model, image is not None)
        self.operation = await self.client.aio.models.generate_videos(**kwargs)
        self._transition(VideoJobState.SUBMITTED)

    async def wait(self) -> None:
        deadline = time.monotonic() + self.settings.video_poll_timeout_sec
        while not getattr(self.operation, "done", False):
            if self.polls >= self.settings.video_poll_max_attempts:
                raise self._fail(f"Video generation did not finish after {self.polls} status checks.")
            if time.monotonic() >= deadline:
                raise self._fail(f"Video generation timed out after {self.settings.video_poll_timeout_sec:.0f}s.")
            self._transition(VideoJobState.POLLING)
            await self.sleep(self.settings.video_poll_interval_sec)
            self.operation = await self.client.aio.operations.get(self.operation)
            self.polls += 1
            logger.info("Video: status check %d, done=%s", self.polls, bool(getattr(self.operation, "done", False)))

        error = getattr(self.operation, "error", None)
        if error:
            raise self._fail(f"Video generation failed: {error}")
        self._transition(VideoJobState.COMPLETED)

    def asset_uri(self) -> Optional[str]:
        response = getattr(self.operation, "response", None)
        videos = getattr(response, "generated_videos", None) or []
        if not videos:
            return None
        video = getattr(videos[0], "video", None)
        return getattr(video, "uri", None) if video is not None else None

    async def materialize(self) -> str:
        uri = self.asset_uri()
        if not uri:
            raise self._fail("Could not generate video.")
        data, mime = await asyncio.to_thread(download_asset, uri, self.settings)
        self._transition(VideoJobState.MATERIALIZED)
        return bytes_to_data_url(data, mime)


def _seed_image(inline_file: Optional[InlineFile]) -> Optional[types.Image]:
    if inline_file is None or not inline_file.mime_type.startswith("image/"):
        return None
    _, b64 = split_data_url(inline_file.data)
    if not b64:
        return None
    return types.Image(image_bytes=base64.b64decode(b64), mime_type=inline_file.mime_type)


def download_asset(uri: str, settings: RelaySettings) -> tuple:
    """Fetch a generated asset; the provider expects the credential as ?key=."""
    resp = requests.get(uri, params={"key": settings.api_key}, timeout=settings.request_timeout_sec)
    resp.raise_for_status()
    mime = (resp.headers.get("content-type") or "video/mp4").split(";")[0].strip() or "video/mp4"
    return resp.content, mime


async def generate_video(settings: RelaySettings,
                         prompt: str,
                         seed_image: Optional[InlineFile] = None,
                         sleep: Optional[Sleeper] = None) -> str:
    """Submit, poll to completion and return the video as a data URL."""
    job = VideoJob(settings, get_genai_client(settings), sleep=sleep)
    await job.submit(prompt, seed_image)
    await job.wait()
    return await job.materialize()
