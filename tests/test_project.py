from __future__ import annotations

import json
from datetime import date

import pytest

from prompt_relay.client.project import (
    ProjectSnapshot,
    apply_generation,
    default_export_name,
    dumps_project,
    example_project,
    export_project,
    import_project,
    loads_project,
    record_error,
)
from prompt_relay.client.request_builder import (
    RelayClient,
    RelayClientError,
    build_analyze_envelope,
    build_generate_envelope,
    load_inline_file,
)
from prompt_relay.core.errors import InvalidRequestError
from prompt_relay.models import GenerationResponse, InlineFile, MasterPrompt, Preview, PreviewKind
from prompt_relay.utils.config import RelaySettings


def _filled_project() -> ProjectSnapshot:
    snap = example_project().model_copy(update={
        "uploaded_file": InlineFile(data="data:image/png;base64,AAAA", mime_type="image/png", name="a.png"),
        "master_languages": {"English": False, "Vietnamese": True, "Japanese": True},
        "temperature": 0.35,
        "top_p": 0.61,
        "aspect_ratio": "3:4",
    })
    resp = GenerationResponse(
        master_prompts=[MasterPrompt(language="Vietnamese", prompt="VI"), MasterPrompt(language="Japanese", prompt="JA")],
        preview=Preview(type=PreviewKind.TEXT, content="Xin chào"),
    )
    return apply_generation(snap, resp)


def test_export_import_round_trip(tmp_path):
    snap = _filled_project()
    path = export_project(snap, str(tmp_path / "p.json"))
    loaded = import_project(path)
    assert loaded == snap
    assert dumps_project(loaded) == dumps_project(snap)


def test_absent_fields_take_defaults():
    loaded = loads_project(json.dumps({"context": "only context", "isLoading": True}))
    assert loaded.context == "only context"
    assert loaded.ai_platform == "Gemini"
    assert loaded.output_type == "Image"
    assert loaded.preview_language == "Vietnamese"
    assert loaded.selected_languages() == ["English", "Vietnamese"]
    assert (loaded.temperature, loaded.top_p, loaded.aspect_ratio) == (0.7, 0.95, "1:1")
    assert loaded.uploaded_file is None
    assert loaded.generation_state.master_prompts == []
    assert loaded.generation_state.preview.type is None


def test_browser_export_is_accepted():
    raw = {
        "outputType": "Video",
        "temperature": None,
        "generationState": {
            "masterPrompts": [{"language": "English", "prompt": "X"}],
            "preview": {"type": "video", "content": "data:video/mp4;base64,AA"},
            "isLoading": False,
            "error": None,
            "loadingMessage": "",
        },
    }
    loaded = loads_project(json.dumps(raw))
    assert loaded.temperature == 0.7
    assert loaded.generation_state.preview.type is PreviewKind.VIDEO


@pytest.mark.parametrize("text", ["{broken", "[]", json.dumps({"temperature": "hot"})])
def test_corrupted_project_file(text):
    with pytest.raises(InvalidRequestError, match="Invalid or corrupted project file"):
        loads_project(text)


def test_error_keeps_inputs():
    snap = _filled_project()
    failed = record_error(snap, "boom")
    assert failed.generation_state.error == "boom"
    assert failed.model_copy(update={"generation_state": snap.generation_state}) == snap


def test_default_export_name():
    assert default_export_name(date(2026, 10, 17)) == "prompt-project-2026-10-17.json"


def test_generate_envelope_uses_selected_languages_in_order():
    env = build_generate_envelope(_filled_project())
    assert env["type"] == "generate"
    payload = env["payload"]
    assert payload["masterPromptLanguages"] == ["Vietnamese", "Japanese"]
    assert payload["topP"] == 0.61
    assert payload["file"]["mimeType"] == "image/png"
    assert "generationState" not in payload


def test_generate_envelope_requires_a_language():
    snap = example_project().model_copy(update={"master_languages": {"English": False}})
    with pytest.raises(InvalidRequestError):
        build_generate_envelope(snap)


def test_analyze_envelope():
    assert build_analyze_envelope("Rate me") == {"type": "analyze", "payload": {"promptToAnalyze": "Rate me"}}
    with pytest.raises(InvalidRequestError):
        build_analyze_envelope("   ")


def test_load_inline_file(tmp_path):
    p = tmp_path / "photo.png"
    p.write_bytes(b"hello")
    f = load_inline_file(str(p))
    assert f.mime_type == "image/png"
    assert f.name == "photo.png"
    assert f.data == "data:image/png;base64,aGVsbG8="


class _FakeResponse:
    def __init__(self, status_code, body):
        self.status_code = status_code
        self._body = body
        self.text = json.dumps(body)

    def json(self):
        return self._body


class _FakeSession:
    def __init__(self, response):
        self.response = response
        self.posted = []

    def post(self, url, json=None, timeout=None):
        self.posted.append((url, json))
        return self.response


def test_client_surfaces_server_error_verbatim():
    session = _FakeSession(_FakeResponse(500, {"error": "API_KEY is not configured on the server."}))
    client = RelayClient("http://relay/api/proxy", session=session)
    with pytest.raises(RelayClientError) as exc:
        client.analyze("hello")
    assert str(exc.value) == "API_KEY is not configured on the server."
    assert exc.value.status_code == 500


def test_client_parses_generation_response():
    body = {"masterPrompts": [{"language": "English", "prompt": "X"}], "preview": {"type": "image", "content": "data:"}}
    session = _FakeSession(_FakeResponse(200, body))
    resp = RelayClient(session=session).generate(_filled_project())
    assert resp.master_prompts[0].prompt == "X"
    assert resp.preview.type is PreviewKind.IMAGE
    assert session.posted[0][1]["type"] == "generate"


def test_client_timeout_outlasts_server_bound():
    server = RelaySettings(api_key="k")
    # structured call, video submit and asset download each get request_timeout_sec
    server_bound = server.video_poll_timeout_sec + 3 * server.request_timeout_sec
    assert RelayClient().timeout > server_bound
