from .generator import answer_question, build_prompt, summarize
from .gemini_client import extract_text, generate_content
from .schema import MindMapAnswer, parse_answer

__all__ = [
    "answer_question",
    "build_prompt",
    "summarize",
    "generate_content",
    "extract_text",
    "MindMapAnswer",
    "parse_answer",
]
