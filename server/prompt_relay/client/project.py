# prompt_relay/client/project.py
"""
Project snapshots: every input field of the authoring form plus the last
generation result, saved to and loaded from a JSON file.

Fields missing from an older snapshot fall back to the defaults below; keys
this version does not know about are ignored.
"""
import json
from datetime import date
from typing import Dict, List, Optional

from pydantic import Field, ValidationError

from prompt_relay.core.errors import InvalidRequestError
from prompt_relay.models import GenerationResponse, InlineFile, MasterPrompt, Preview, WireModel

SUPPORTED_LANGUAGES = ["English", "Vietnamese", "Chinese", "French", "Japanese", "Spanish"]


def default_master_languages() -> Dict[str, bool]:
    return {lang: lang in ("English", "Vietnamese") for lang in SUPPORTED_LANGUAGES}


class GenerationState(WireModel):
    master_prompts: List[MasterPrompt] = Field(default_factory=list)
    preview: Preview = Field(default_factory=Preview)
    error: Optional[str] = None


class ProjectSnapshot(WireModel):
    context: str = ""
    objective: str = ""
    role: str = ""
    expectations: str = ""
    system_instruction: str = ""
    prompt_body: str = ""
    media_instruction: str = ""
    ai_platform: str = "Gemini"
    output_type: str = "Image"
    uploaded_file: Optional[InlineFile] = None
    preview_language: str = "Vietnamese"
    master_languages: Dict[str, bool] = Field(default_factory=default_master_languages)
    temperature: float = 0.7
    top_p: float = 0.95
    aspect_ratio: str = "1:1"
    generation_state: GenerationState = Field(default_factory=GenerationState)

    def selected_languages(self) -> List[str]:
        return [lang for lang, on in self.master_languages.items() if on]


def default_export_name(today: Optional[date] = None) -> str:
    return f"prompt-project-{(today or date.today()).isoformat()}.json"


def dumps_project(snapshot: ProjectSnapshot) -> str:
    return json.dumps(snapshot.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False)


def loads_project(text: str) -> ProjectSnapshot:
    try:
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("project file must hold a JSON object")
        # older exports may carry explicit nulls where a default is expected
        data = {k: v for k, v in data.items() if v is not None or k == "uploadedFile"}
        return ProjectSnapshot.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise InvalidRequestError("Invalid or corrupted project file.") from e


def export_project(snapshot: ProjectSnapshot, path: str) -> str:
    with open(path, "w", encoding="utf-8") as fh:
        fh.write(dumps_project(snapshot))
    return path


def import_project(path: str) -> ProjectSnapshot:
    with open(path, "r", encoding="utf-8") as fh:
        return loads_project(fh.read())


def apply_generation(snapshot: ProjectSnapshot, response: GenerationResponse) -> ProjectSnapshot:
    """Replace the generation state; inputs are left as they were."""
    state = GenerationState(master_prompts=list(response.master_prompts), preview=response.preview)
    return snapshot.model_copy(update={"generation_state": state})


def record_error(snapshot: ProjectSnapshot, message: str) -> ProjectSnapshot:
    state = snapshot.generation_state.model_copy(update={"error": message})
    return snapshot.model_copy(update={"generation_state": state})


def example_project() -> ProjectSnapshot:
    return ProjectSnapshot(
        context='Một công ty công nghệ sắp ra mắt một ứng dụng quản lý dự án mới dựa trên AI có tên là "SynergizeAI".',
        objective=(
            "Viết một bài blog thông báo chi tiết về sự ra mắt, nêu bật các tính năng chính (như tự động phân "
            "công nhiệm vụ, dự báo tiến độ), lợi ích cho người dùng, và cách nó giải quyết các vấn đề phổ biến "
            "trong quản lý dự án."
        ),
        role="Hãy hành động như một nhà văn công nghệ chuyên nghiệp và một người đam mê năng suất.",
        expectations=(
            "Bài viết phải dài khoảng 800-1000 từ, có cấu trúc rõ ràng với các tiêu đề phụ, giọng văn chuyên "
            "nghiệp nhưng dễ tiếp cận, và kết thúc bằng lời kêu gọi hành động để người dùng đăng ký dùng thử "
            "bản beta."
        ),
        system_instruction=(
            "Bạn là một AI chuyên viết nội dung marketing cho các sản phẩm SaaS B2B, có khả năng biến các tính "
            "năng kỹ thuật thành lợi ích hấp dẫn cho khách hàng."
        ),
        prompt_body="Viết một bài blog giới thiệu ứng dụng quản lý dự án mới của chúng tôi, SynergizeAI.",
        media_instruction="Không có.",
        output_type="Bài viết Blog",
    )
