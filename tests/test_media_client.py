from __future__ import annotations

import asyncio
import base64
from types import SimpleNamespace

import pytest

from prompt_relay.core import media_client
from prompt_relay.core.errors import GenerationError
from prompt_relay.core.media_client import VideoJob, VideoJobState
from prompt_relay.models import InlineFile
from prompt_relay.utils.config import RelaySettings


def _operation(done: bool, uri=None, error=None):
    videos = [SimpleNamespace(video=SimpleNamespace(uri=uri))] if uri else []
    return SimpleNamespace(done=done, error=error, response=SimpleNamespace(generated_videos=videos))


class FakeGenai:
    """Video job that reports not-done `pending` times before finishing."""

    def __init__(self, pending: int, final):
        self.pending = pending
        self.final = final
        self.status_checks = 0
        self.submitted = None
        self.aio = SimpleNamespace(
            models=SimpleNamespace(generate_videos=self._generate_videos),
            operations=SimpleNamespace(get=self._get),
        )

    async def _generate_videos(self, **kwargs):
        self.submitted = kwargs
        return _operation(done=False)

    async def _get(self, operation):
        self.status_checks += 1
        if self.status_checks <= self.pending:
            return _operation(done=False)
        return self.final


async def _no_sleep(seconds):
    return None


def _run_job(settings, fake, seed=None):
    async def go():
        job = VideoJob(settings, fake, sleep=_no_sleep)
        await job.submit("a cat surfing", seed)
        await job.wait()
        return job, await job.materialize()
    return asyncio.run(go())


@pytest.fixture
def fake_download(monkeypatch):
    calls = []

    def download(uri, settings):
        calls.append(uri)
        return b"video-bytes", "video/mp4"

    monkeypatch.setattr(media_client, "download_asset", download)
    return calls


@pytest.mark.parametrize("pending", [0, 1, 3])
def test_polls_n_plus_one_times(settings, fake_download, pending):
    fake = FakeGenai(pending, _operation(done=True, uri="https://example.test/v.mp4?alt=media"))
    job, data_url = _run_job(settings, fake)
    assert fake.status_checks == pending + 1
    assert job.polls == pending + 1
    assert job.state is VideoJobState.MATERIALIZED
    assert fake_download == ["https://example.test/v.mp4?alt=media"]
    assert data_url == "data:video/mp4;base64," + base64.b64encode(b"video-bytes").decode("ascii")


def test_completed_without_asset_is_generation_error(settings, fake_download):
    fake = FakeGenai(2, _operation(done=True))
    with pytest.raises(GenerationError, match="Could not generate video"):
        _run_job(settings, fake)
    assert fake_download == []


def test_operation_error_fails_job(settings, fake_download):
    fake = FakeGenai(0, _operation(done=True, error={"code": 3, "message": "blocked"}))
    with pytest.raises(GenerationError, match="failed"):
        _run_job(settings, fake)


def test_polling_is_bounded(settings, fake_download):
    fake = FakeGenai(10_000, _operation(done=True, uri="u"))
    with pytest.raises(GenerationError, match="did not finish"):
        _run_job(settings, fake)
    assert fake.status_checks == settings.video_poll_max_attempts


def test_image_upload_seeds_video(settings, fake_download):
    seed = InlineFile(data="data:image/png;base64," + base64.b64encode(b"png").decode(), mime_type="image/png")
    fake = FakeGenai(0, _operation(done=True, uri="u"))
    _run_job(settings, fake, seed)
    image = fake.submitted["image"]
    assert image.image_bytes == b"png"
    assert image.mime_type == "image/png"
    assert fake.submitted["model"] == settings.video_model


def test_non_image_upload_is_not_a_seed(settings, fake_download):
    doc = InlineFile(data="data:application/pdf;base64,JVBERi0=", mime_type="application/pdf")
    fake = FakeGenai(0, _operation(done=True, uri="u"))
    _run_job(settings, fake, doc)
    assert "image" not in fake.submitted


def test_generate_image_returns_png_data_url(settings, monkeypatch):
    seen = {}

    async def generate_images(**kwargs):
        seen.update(kwargs)
        image = SimpleNamespace(image_bytes=b"\x89PNG")
        return SimpleNamespace(generated_images=[SimpleNamespace(image=image)])

    fake = SimpleNamespace(aio=SimpleNamespace(models=SimpleNamespace(generate_images=generate_images)))
    monkeypatch.setattr(media_client, "get_genai_client", lambda s: fake)

    url = asyncio.run(media_client.generate_image(settings, "a lighthouse", "16:9"))
    assert url == "data:image/png;base64," + base64.b64encode(b"\x89PNG").decode("ascii")
    assert seen["prompt"] == "a lighthouse"
    assert seen["config"].aspect_ratio == "16:9"
    assert seen["config"].number_of_images == 1


def test_generate_image_without_result(settings, monkeypatch):
    async def generate_images(**kwargs):
        return SimpleNamespace(generated_images=[])

    fake = SimpleNamespace(aio=SimpleNamespace(models=SimpleNamespace(generate_images=generate_images)))
    monkeypatch.setattr(media_client, "get_genai_client", lambda s: fake)
    with pytest.raises(GenerationError):
        asyncio.run(media_client.generate_image(settings, "x", "1:1"))


def test_download_sends_key_and_falls_back_to_mp4(settings, monkeypatch):
    seen = {}

    class Resp:
        headers = {}
        content = b"mp4"

        def raise_for_status(self):
            return None

    def fake_get(url, params=None, timeout=None):
        seen.update(url=url, params=params, timeout=timeout)
        return Resp()

    monkeypatch.setattr(media_client.requests, "get", fake_get)
    data, mime = media_client.download_asset("https://example.test/v:download?alt=media", settings)
    assert (data, mime) == (b"mp4", "video/mp4")
    assert seen["params"] == {"key": "test-key"}
    assert seen["timeout"] == settings.request_timeout_sec


def test_download_uses_content_type(settings, monkeypatch):
    class Resp:
        headers = {"content-type": "video/webm; charset=binary"}
        content = b"webm"

        def raise_for_status(self):
            return None

    monkeypatch.setattr(media_client.requests, "get", lambda url, params=None, timeout=None: Resp())
    assert media_client.download_asset("u", settings) == (b"webm", "video/webm")


def test_polling_stops_at_wall_clock_timeout(fake_download):
    tight = RelaySettings(api_key="test-key", video_poll_interval_sec=0.0,
                          video_poll_timeout_sec=0.0, video_poll_max_attempts=10**6)
    fake = FakeGenai(10_000, _operation(done=True, uri="u"))
    with pytest.raises(GenerationError, match="timed out"):
        _run_job(tight, fake)
    assert fake.status_checks == 0
