from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    # camelCase on the wire, snake_case in Python
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RequestType(str, Enum):
    GENERATE = "generate"
    ANALYZE = "analyze"


class PreviewKind(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"


class ProxyEnvelope(BaseModel):
    type: str
    payload: Dict[str, Any] = Field(default_factory=dict)


class InlineFile(WireModel):
    data: str = Field(..., description="data:<mime>;base64,<payload>")
    mime_type: str
    name: Optional[str] = None


class GenerationRequest(WireModel):
    context: str = ""
    objective: str = ""
    role: str = ""
    expectations: str = ""
    system_instruction: str = ""
    prompt_body: str = ""
    media_instruction: str = ""
    ai_platform: str = "Gemini"
    output_type: str = "Image"
    file: Optional[InlineFile] = None
    preview_language: str = "Vietnamese"
    master_prompt_languages: List[str] = Field(..., min_length=1)
    temperature: float = 0.7
    top_p: float = 0.95
    aspect_ratio: str = "1:1"


class MasterPrompt(WireModel):
    language: str = Field(..., description="The language of the prompt (e.g. 'English', 'Vietnamese').")
    prompt: str = Field(..., description="The master prompt text in the specified language.")


class MasterPromptsModel(WireModel):
    """Structured output shape requested from the model for the master prompts."""
    prompts: List[MasterPrompt] = Field(..., description="An array of master prompts, one for each requested language.")


class Preview(WireModel):
    type: Optional[PreviewKind] = None
    content: str = ""


class GenerationResponse(WireModel):
    master_prompts: List[MasterPrompt]
    preview: Preview = Field(default_factory=Preview)


class AnalyzeRequest(WireModel):
    prompt_to_analyze: str


class CoreAnalysis(WireModel):
    context: str = Field(..., description="Analysis of the Context component.")
    objective: str = Field(..., description="Analysis of the Objective component.")
    role: str = Field(..., description="Analysis of the Role component.")
    expectations: str = Field(..., description="Analysis of the Expectations component.")


class AnalysisResult(WireModel):
    # score range and field contents are passed through as the model returned them
    score: float = Field(..., description="A score from 0 to 100 for the prompt's quality.")
    analysis: CoreAnalysis
    suggestions: str = Field(..., description="A paragraph of actionable suggestions for improving the prompt.")


class ErrorResponse(BaseModel):
    error: str
