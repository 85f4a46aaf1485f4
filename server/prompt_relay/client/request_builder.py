# prompt_relay/client/request_builder.py
import logging
from typing import Any, Dict, Optional

import requests

from prompt_relay.client.project import ProjectSnapshot
from prompt_relay.core.errors import InvalidRequestError
from prompt_relay.models import (
    AnalysisResult,
    AnalyzeRequest,
    GenerationRequest,
    GenerationResponse,
    InlineFile,
    RequestType,
)
from prompt_relay.utils.file_helpers import read_file_as_data_url

logger = logging.getLogger(__name__)

DEFAULT_RELAY_URL = "http://localhost:8000/api/proxy"
# must outlast the server: structured call + video submit + poll timeout + download
DEFAULT_CLIENT_TIMEOUT = 1500


class RelayClientError(Exception):
    """The relay answered with a non-200 status; message is its 'error' field."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def load_inline_file(path: str) -> InlineFile:
    data_url, mime, name = read_file_as_data_url(path)
    return InlineFile(data=data_url, mime_type=mime, name=name)


def build_generation_request(snapshot: ProjectSnapshot) -> GenerationRequest:
    languages = snapshot.selected_languages()
    if not languages:
        raise InvalidRequestError("Please select at least one language for the master prompt.")
    return GenerationRequest(
        context=snapshot.context,
        objective=snapshot.objective,
        role=snapshot.role,
        expectations=snapshot.expectations,
        system_instruction=snapshot.system_instruction,
        prompt_body=snapshot.prompt_body,
        media_instruction=snapshot.media_instruction,
        ai_platform=snapshot.ai_platform,
        output_type=snapshot.output_type,
        file=snapshot.uploaded_file,
        preview_language=snapshot.preview_language,
        master_prompt_languages=languages,
        temperature=snapshot.temperature,
        top_p=snapshot.top_p,
        aspect_ratio=snapshot.aspect_ratio,
    )


def build_generate_envelope(snapshot: ProjectSnapshot) -> Dict[str, Any]:
    req = build_generation_request(snapshot)
    return {
        "type": RequestType.GENERATE.value,
        "payload": req.model_dump(mode="json", by_alias=True, exclude_none=True),
    }


def build_analyze_envelope(prompt_to_analyze: str) -> Dict[str, Any]:
    if not (prompt_to_analyze or "").strip():
        raise InvalidRequestError("Please enter a prompt to analyze.")
    req = AnalyzeRequest(prompt_to_analyze=prompt_to_analyze)
    return {"type": RequestType.ANALYZE.value, "payload": req.model_dump(by_alias=True)}


class RelayClient:
    def __init__(self, url: str = DEFAULT_RELAY_URL, timeout: int = DEFAULT_CLIENT_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def send(self, envelope: Dict[str, Any]) -> Dict[str, Any]:
        logger.debug("POST %s type=%s", self.url, envelope.get("type"))
        resp = self.session.post(self.url, json=envelope, timeout=self.timeout)
        try:
            body = resp.json()
        except ValueError:
            body = {}
        if resp.status_code != 200:
            message = body.get("error") if isinstance(body, dict) else None
            raise RelayClientError(message or f"HTTP {resp.status_code}: {resp.text[:200]}", resp.status_code)
        return body

    def generate(self, snapshot: ProjectSnapshot) -> GenerationResponse:
        return GenerationResponse.model_validate(self.send(build_generate_envelope(snapshot)))

    def analyze(self, prompt_to_analyze: str) -> AnalysisResult:
        return AnalysisResult.model_validate(self.send(build_analyze_envelope(prompt_to_analyze)))
