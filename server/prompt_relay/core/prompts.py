# prompt_relay/core/prompts.py
"""
Meta-prompts sent to the text model.

Both prompts ask for JSON-only output; the schema itself is enforced through
structured output (see core.llm_client), these texts only describe the task.
"""

from typing import Iterable

from prompt_relay.models import GenerationRequest

NO_MEDIA_INSTRUCTION = "Không có"


def build_master_prompt_request(req: GenerationRequest) -> str:
    """
    Instruction that turns the C.O.R.E fields into one master prompt per
    requested language.
    """
    languages = ", ".join(req.master_prompt_languages)
    lines = [
        "You are a world-class prompt engineering expert AI. Your task is to create a \"Master Prompt\" "
        "based on the user's structured input using the C.O.R.E framework.",
        "The goal is to synthesize the provided components into a powerful, clear, and effective prompt "
        "tailored for the specified AI platform and desired output format.",
        "",
        "**User's Input Components (C.O.R.E Framework):**",
        f"1.  **Context (Bối cảnh):** {req.context}",
        f"2.  **Objective (Mục tiêu):** {req.objective}",
        f"3.  **Role (Vai trò AI cần đảm nhận):** {req.role}",
        f"4.  **Expectations (Kỳ vọng về kết quả):** {req.expectations}",
        "",
        "**Additional Instructions:**",
        f"*   **System Instruction (Overall AI Persona):** {req.system_instruction}",
        f"*   **Main Prompt Body (The Core Task):** {req.prompt_body}",
        f"*   **Media Instructions (If any):** {req.media_instruction or NO_MEDIA_INSTRUCTION}",
        f"*   **Target AI Platform:** {req.ai_platform}",
        f"*   **Output Format:** {req.output_type}",
        "",
        "**Your Instructions:**",
        "1.  Analyze all components to understand the user's ultimate goal. Use the **Objective** to understand "
        "the *purpose* and the **Output Format** to determine the structure and style of the final product.",
        "2.  Combine and refine the components into a single, cohesive \"Master Prompt\".",
        "3.  The Master Prompt should start with the Role, then integrate Context, Objective, and Expectations clearly.",
        "4.  Ensure the prompt uses advanced techniques to guide the AI model effectively.",
        f"5.  Provide the final Master Prompt in the following languages: {languages}.",
        "6.  Your response MUST be a valid JSON object. Do not include any text, comments, or markdown "
        "formatting (like ```json) before or after the JSON object.",
    ]
    return "\n".join(lines)


def build_analysis_prompt(prompt_to_analyze: str) -> str:
    lines = [
        "You are a world-class prompt engineering expert AI. Your task is to analyze and evaluate the quality "
        "of a given prompt based on the C.O.R.E framework (Context, Objective, Role, Expectations).",
        "",
        "**User's Prompt to Analyze:**",
        '"""',
        prompt_to_analyze,
        '"""',
        "",
        "**Your Instructions:**",
        "1.  **Deconstruct the Prompt:** Break down the provided prompt and identify elements that correspond to "
        "Context, Objective, Role, and Expectations. If a component is missing or weak, state that clearly.",
        "2.  **Score the Prompt:** Provide a numerical score from 0 to 100, where 100 is a perfect, highly "
        "effective prompt. The score should be based on the clarity, completeness, and effectiveness of the "
        "C.O.R.E components.",
        "3.  **Provide Detailed Analysis:** For each C.O.R.E component, give a brief analysis of its quality in "
        "the provided prompt.",
        "4.  **Give Actionable Suggestions:** Offer concrete, actionable suggestions for how to improve the prompt.",
        "5.  Your response MUST be a valid JSON object. Do not include any text, comments, or markdown "
        "formatting (like ```json) before or after the JSON object.",
    ]
    return "\n".join(lines)


def with_language_instruction(prompt: str, language: str) -> str:
    return f"{prompt}\n\n--- IMPORTANT: Please provide your entire response in {language}. ---"


def summarize_languages(languages: Iterable[str]) -> str:
    return ", ".join(languages) or "(none)"
