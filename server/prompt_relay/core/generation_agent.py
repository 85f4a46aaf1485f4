# prompt_relay/core/generation_agent.py
"""
Generation handler
- Exposes:
    async def generate_prompts(req, settings) -> GenerationResponse
- Steps:
    - ask the text model for one master prompt per requested language
    - pick the base prompt (English if present, else the first one)
    - classify the output type and materialize exactly one preview
"""
import logging
import time
from typing import List, Optional

from prompt_relay.core import media_client
from prompt_relay.core.errors import GenerationError
from prompt_relay.core.llm_client import call_structured_generation, call_text_generation
from prompt_relay.core.prompts import build_master_prompt_request, summarize_languages, with_language_instruction
from prompt_relay.models import (
    GenerationRequest,
    GenerationResponse,
    MasterPrompt,
    MasterPromptsModel,
    Preview,
    PreviewKind,
)
from prompt_relay.utils.config import RelaySettings

logger = logging.getLogger(__name__)

IMAGE_OUTPUT_TYPES = frozenset({"Image", "Ảnh", "Hình ảnh"})
VIDEO_OUTPUT_TYPES = frozenset({"Video", "Phim ngắn"})


def classify_output_type(output_type: str) -> PreviewKind:
    """Exact membership test; unknown tokens fall back to text."""
    if output_type in IMAGE_OUTPUT_TYPES:
        return PreviewKind.IMAGE
    if output_type in VIDEO_OUTPUT_TYPES:
        return PreviewKind.VIDEO
    return PreviewKind.TEXT


def select_base_prompt(prompts: List[MasterPrompt]) -> str:
    if not prompts:
        raise GenerationError("AI did not return any prompts.")
    for p in prompts:
        if (p.language or "").strip().lower() == "english":
            return p.prompt
    return prompts[0].prompt


async def fetch_master_prompts(req: GenerationRequest, settings: RelaySettings) -> List[MasterPrompt]:
    meta_prompt = build_master_prompt_request(req)
    result = await call_structured_generation(meta_prompt, MasterPromptsModel, settings)
    if not result.prompts:
        raise GenerationError("AI did not return any prompts.")
    return list(result.prompts)


async def render_preview(req: GenerationRequest,
                         base_prompt: str,
                         settings: RelaySettings,
                         sleep: Optional[media_client.Sleeper] = None) -> Preview:
    kind = classify_output_type(req.output_type)
    logger.info("Preview pathway: %s (output type %r)", kind.value, req.output_type)

    if kind is PreviewKind.IMAGE:
        content = await media_client.generate_image(settings, base_prompt, req.aspect_ratio)
    elif kind is PreviewKind.VIDEO:
        content = await media_client.generate_video(settings, base_prompt, seed_image=req.file, sleep=sleep)
    else:
        content = await call_text_generation(
            with_language_instruction(base_prompt, req.preview_language),
            settings,
            temperature=req.temperature,
            top_p=req.top_p,
            inline_file=req.file,
        )
    return Preview(type=kind, content=content)


async def generate_prompts(req: GenerationRequest,
                           settings: RelaySettings,
                           sleep: Optional[media_client.Sleeper] = None) -> GenerationResponse:
    start = time.time()
    logger.info("Generate: platform=%s output=%s languages=%s",
                req.ai_platform, req.output_type, summarize_languages(req.master_prompt_languages))

    master_prompts = await fetch_master_prompts(req, settings)
    base_prompt = select_base_prompt(master_prompts)
    preview = await render_preview(req, base_prompt, settings, sleep=sleep)

    logger.info("Generate: %d master prompts, %s preview in %.1fs",
                len(master_prompts), preview.type.value if preview.type else "no", time.time() - start)
    return GenerationResponse(master_prompts=master_prompts, preview=preview)
