# prompt_relay/core/analysis_agent.py
import logging

from prompt_relay.core.llm_client import call_structured_generation
from prompt_relay.core.prompts import build_analysis_prompt
from prompt_relay.models import AnalysisResult, AnalyzeRequest
from prompt_relay.utils.config import RelaySettings

logger = logging.getLogger(__name__)


async def analyze_prompt(req: AnalyzeRequest, settings: RelaySettings) -> AnalysisResult:
    """
    Score a free-text prompt against C.O.R.E.
    The result is returned as the model produced it: no clamping of the score,
    no checks on empty analysis fields.
    """
    logger.info("Analyze: %d chars", len(req.prompt_to_analyze))
    result = await call_structured_generation(build_analysis_prompt(req.prompt_to_analyze), AnalysisResult, settings)
    logger.info("Analyze: score=%s", result.score)
    return result
