# prompt_relay/core/llm_client.py
import base64
import json
import logging
import time
from typing import Any, Dict, List, Optional, Type, TypeVar

from langchain_core.exceptions import OutputParserException
from langchain_core.messages import HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI
from pydantic import BaseModel, ValidationError

from prompt_relay.core.errors import ConfigurationError, GenerationError
from prompt_relay.models import InlineFile
from prompt_relay.utils.config import RelaySettings
from prompt_relay.utils.file_helpers import split_data_url

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


# -------------------------
# LLM init
# -------------------------
def get_llm(settings: RelaySettings,
            temperature: Optional[float] = None,
            top_p: Optional[float] = None) -> ChatGoogleGenerativeAI:
    if not settings.has_credential:
        raise ConfigurationError("API_KEY is not configured on the server.")
    kwargs: Dict[str, Any] = {
        "model": settings.text_model,
        "google_api_key": settings.api_key,
        "timeout": settings.request_timeout_sec,
        # retries are the caller's business; one call is one attempt
        "max_retries": 0,
    }
    if temperature is not None:
        kwargs["temperature"] = temperature
    if top_p is not None:
        kwargs["top_p"] = top_p
    return ChatGoogleGenerativeAI(**kwargs)


def _coerce_structured(result: Any, structured_model: Type[M]) -> M:
    """
    Structured output normally comes back as a model instance; some wrapper
    versions hand back a dict or a JSON string instead.
    """
    if result is None:
        raise GenerationError("AI returned an empty structured response.")
    if isinstance(result, structured_model):
        return result
    try:
        if isinstance(result, BaseModel):
            return structured_model.model_validate(result.model_dump(by_alias=True))
        if isinstance(result, dict):
            return structured_model.model_validate(result)
        return structured_model.model_validate(json.loads(str(result).strip()))
    except (ValidationError, ValueError) as e:
        raise GenerationError(f"AI returned a malformed structured response: {e}") from e


# -------------------------
# Calls
# -------------------------
async def call_structured_generation(prompt: str,
                                     structured_model: Type[M],
                                     settings: RelaySettings) -> M:
    """
    Ask the text model for a JSON object matching structured_model.
    Raises GenerationError when nothing usable comes back.
    """
    llm = get_llm(settings)
    structured_callable = llm.with_structured_output(structured_model, method="json_mode")

    start_ts = time.time()
    try:
        result = await structured_callable.ainvoke(prompt)
    except OutputParserException as e:
        raise GenerationError(f"AI returned a malformed structured response: {e}") from e
    logger.debug("structured %s call took %.2fs", structured_model.__name__, time.time() - start_ts)
    return _coerce_structured(result, structured_model)


def build_preview_content(prompt: str, inline_file: Optional[InlineFile] = None) -> List[Dict[str, Any]]:
    """
    Content blocks for the text preview. An attached file goes first as inline
    binary input, the prompt text last.
    """
    parts: List[Dict[str, Any]] = [{"type": "text", "text": prompt}]
    if inline_file is not None:
        _, b64 = split_data_url(inline_file.data)
        if b64:
            parts.insert(0, {
                "type": "media",
                "mime_type": inline_file.mime_type,
                "data": base64.b64decode(b64),
            })
    return parts


def _message_text(message: Any) -> str:
    content = getattr(message, "content", message)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        chunks = []
        for it in content:
            if isinstance(it, str):
                chunks.append(it)
            elif isinstance(it, dict) and it.get("type") == "text":
                chunks.append(it.get("text", ""))
        return "".join(chunks)
    return str(content or "")


async def call_text_generation(prompt: str,
                               settings: RelaySettings,
                               *,
                               temperature: Optional[float] = None,
                               top_p: Optional[float] = None,
                               inline_file: Optional[InlineFile] = None) -> str:
    llm = get_llm(settings, temperature=temperature, top_p=top_p)
    message = HumanMessage(content=build_preview_content(prompt, inline_file))

    start_ts = time.time()
    response = await llm.ainvoke([message])
    text = _message_text(response)
    logger.debug("text preview call took %.2fs (%d chars)", time.time() - start_ts, len(text))
    return text
