from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from prompt_relay.main import create_app
from prompt_relay.utils.config import RelaySettings


@pytest.fixture
def settings() -> RelaySettings:
    return RelaySettings(
        api_key="test-key",
        video_poll_interval_sec=0.0,
        video_poll_max_attempts=10,
        video_poll_timeout_sec=60.0,
    )


@pytest.fixture
def client(settings) -> TestClient:
    return TestClient(create_app(settings))


@pytest.fixture
def keyless_client() -> TestClient:
    return TestClient(create_app(RelaySettings(api_key="")))


@pytest.fixture
def generate_payload() -> dict:
    return {
        "context": "A SaaS launch",
        "objective": "Announce the product",
        "role": "Tech writer",
        "expectations": "800 words",
        "systemInstruction": "",
        "promptBody": "Write a blog post",
        "mediaInstruction": "",
        "aiPlatform": "Gemini",
        "outputType": "Email",
        "previewLanguage": "Vietnamese",
        "masterPromptLanguages": ["English", "Vietnamese"],
        "temperature": 0.4,
        "topP": 0.9,
        "aspectRatio": "16:9",
    }
