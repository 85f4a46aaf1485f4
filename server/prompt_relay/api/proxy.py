# prompt_relay/api/proxy.py
import json
import logging
from typing import Any, Awaitable, Callable, Dict, Tuple, Type

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from prompt_relay.api.dependencies import get_settings
from prompt_relay.core.analysis_agent import analyze_prompt
from prompt_relay.core.errors import ConfigurationError, InvalidRequestError, RelayError
from prompt_relay.core.generation_agent import generate_prompts
from prompt_relay.models import AnalyzeRequest, ErrorResponse, GenerationRequest, ProxyEnvelope, RequestType
from prompt_relay.utils.config import RelaySettings

logger = logging.getLogger(__name__)

router = APIRouter()

Handler = Callable[[Any, RelaySettings], Awaitable[BaseModel]]

# closed dispatch table: envelope type -> (payload model, handler)
HANDLERS: Dict[RequestType, Tuple[Type[BaseModel], Handler]] = {
    RequestType.GENERATE: (GenerationRequest, generate_prompts),
    RequestType.ANALYZE: (AnalyzeRequest, analyze_prompt),
}


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _validation_message(e: ValidationError) -> str:
    parts = []
    for err in e.errors():
        loc = ".".join(str(x) for x in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "Invalid payload: " + "; ".join(parts)


async def _read_envelope(request: Request) -> ProxyEnvelope:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidRequestError(f"Request body is not valid JSON: {e}") from e
    if not isinstance(body, dict):
        raise InvalidRequestError("Request body must be a JSON object")
    try:
        return ProxyEnvelope.model_validate(body)
    except ValidationError as e:
        raise InvalidRequestError(_validation_message(e)) from e


def resolve_handler(type_tag: str) -> Tuple[Type[BaseModel], Handler]:
    try:
        return HANDLERS[RequestType(type_tag)]
    except ValueError:
        raise InvalidRequestError("Invalid request type") from None


def parse_payload(model: Type[BaseModel], payload: Dict[str, Any]) -> BaseModel:
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise InvalidRequestError(_validation_message(e)) from e


@router.post("/proxy", responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})
async def proxy(request: Request, settings: RelaySettings = Depends(get_settings)):
    """
    Single entry point for the client.
    Request JSON:  {"type": "generate" | "analyze", "payload": {...}}
    Response:      the handler result (200) or {"error": "..."} (400 / 500)
    """
    try:
        if not settings.has_credential:
            raise ConfigurationError("API_KEY is not configured on the server.")
        envelope = await _read_envelope(request)
        payload_model, handler = resolve_handler(envelope.type)
        payload = parse_payload(payload_model, envelope.payload)
        result = await handler(payload, settings)
        return JSONResponse(result.model_dump(mode="json", by_alias=True))
    except RelayError as e:
        if e.status_code >= 500:
            logger.exception("Proxy: %s", e.message)
        else:
            logger.warning("Proxy: rejected request: %s", e.message)
        return _error(e.message, e.status_code)
    except Exception as e:
        logger.exception("Error in proxy handler")
        return _error(str(e) or "An unknown error occurred.", 500)
