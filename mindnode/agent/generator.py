import logging
from typing import Any, Callable, Dict, Optional

from ..errors import GenerationError, MindMapError
from .gemini_client import extract_text, generate_content
from .schema import MindMapAnswer, parse_answer

logger = logging.getLogger(__name__)

ContentClient = Callable[..., Dict[str, Any]]

CONTEXT_LIMIT = 30000
SUMMARY_LIMIT = 10000
NO_CONTEXT_TEXT = "No source material provided."
FALLBACK_ANSWER = (
    "I'm sorry, I couldn't generate a response. Please ensure the backend is configured correctly."
)
FALLBACK_SUMMARY = "Could not generate summary."


def build_prompt(query: str, context_text: str = "") -> str:
    context = context_text[:CONTEXT_LIMIT] if context_text else NO_CONTEXT_TEXT
    return (
        "--- SOURCE MATERIAL / CONTEXT ---\n"
        f"{context}\n"
        "---------------------------------\n\n"
        f"User Question: {query}\n\n"
        "Answer based STRICTLY on the source material above:\n"
    )


def _text_payload(text: str, **generation_config: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"contents": [{"parts": [{"text": text}]}]}
    if generation_config:
        payload["generationConfig"] = dict(generation_config)
    return payload


def answer_question(
    query: str,
    context_text: str = "",
    *,
    client: ContentClient = generate_content,
    client_kwargs: Optional[Dict[str, Any]] = None,
    strict: bool = False,
) -> MindMapAnswer:
    """Ask the model a question about ``context_text`` and parse its mind map.

    Failures are logged and turned into a fallback answer without a mind map,
    unless ``strict`` is set, in which case the error propagates.
    """
    payload = _text_payload(build_prompt(query, context_text), responseMimeType="application/json")
    try:
        response = client(payload, **(client_kwargs or {}))
        return parse_answer(extract_text(response))
    except MindMapError as exc:
        if strict:
            raise
        logger.error("Failed to generate mind map answer: %s", exc)
        return MindMapAnswer(text=FALLBACK_ANSWER, mind_map=None)


def summarize(
    text: str,
    *,
    client: ContentClient = generate_content,
    client_kwargs: Optional[Dict[str, Any]] = None,
) -> str:
    prompt = (
        "Summarize the following text into 3-4 distinct bullet points of key takeaways:\n\n"
        f"{text[:SUMMARY_LIMIT]}"
    )
    kwargs = {"system_prompt": None}
    kwargs.update(client_kwargs or {})
    try:
        return extract_text(client(_text_payload(prompt), **kwargs))
    except GenerationError as exc:
        logger.error("Failed to summarize text: %s", exc)
        return FALLBACK_SUMMARY
