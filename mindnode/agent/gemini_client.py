import json
import logging
import os
import time
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

import requests

from ..errors import GenerationError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash-preview-09-2025"
DEFAULT_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
DEFAULT_RETRY_DELAYS = (1.0, 2.0, 4.0, 8.0, 16.0)

MINDMAP_SYSTEM_PROMPT = """\
You are a strict research assistant and mind map generator.

Answer ONLY using the provided "Source Material/Context". Do not use outside
knowledge to fill in gaps. If the answer is not in the source material, say:
"The provided source document does not contain information about [topic]." and
do not generate a mind map for the missing part.

Return a valid JSON object with exactly two keys:
1. "text": a natural language answer derived strictly from the source.
2. "mindMap": a hierarchical object for visualization with
   - "id": string (unique across the whole tree)
   - "label": string (display text)
   - "type": "root" | "child" | "code"
   - "children": array of node objects (recursive structure).

Style guide:
- Concepts: keep labels short (3-4 words).
- Commands and code: copy the command string exactly as it appears in the
  source, set the node "type" to "code", and place it under a branch named
  after the tool.
"""


def _resolve_api_key(explicit_key: Optional[str]) -> str:
    api_key = explicit_key or os.getenv("GEMINI_API_KEY")
    if not api_key:
        raise GenerationError(
            "Gemini API key is missing. Provide via `api_key` argument or GEMINI_API_KEY env var."
        )
    return api_key


def _error_message(response: requests.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text.strip() or "no message"
    if isinstance(data, Mapping):
        error = data.get("error")
        if isinstance(error, Mapping):
            return str(error.get("message") or error)
        if error:
            return str(error)
    return response.text.strip() or "no message"


def generate_content(
    payload: Mapping[str, Any],
    *,
    model: str = DEFAULT_MODEL,
    system_prompt: Optional[str] = MINDMAP_SYSTEM_PROMPT,
    api_key: Optional[str] = None,
    url: str = DEFAULT_URL,
    timeout: float = 60.0,
    retry_delays: Sequence[float] = DEFAULT_RETRY_DELAYS,
    session: Optional[requests.Session] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Dict[str, Any]:
    """POST ``payload`` to the Gemini ``generateContent`` endpoint.

    ``system_prompt`` is added as the system instruction unless the payload
    already carries one. HTTP 429 responses are retried after each delay in
    ``retry_delays``; any other error status raises ``GenerationError``.
    """
    body = dict(payload)
    if system_prompt and "systemInstruction" not in body:
        body["systemInstruction"] = {"parts": [{"text": system_prompt}]}

    endpoint = url.format(model=model)
    headers = {
        "Content-Type": "application/json",
        "x-goog-api-key": _resolve_api_key(api_key),
    }
    http = session or requests

    attempt = 0
    while True:
        try:
            response = http.post(endpoint, headers=headers, data=json.dumps(body), timeout=timeout)
        except requests.RequestException as exc:
            raise GenerationError(f"Gemini request failed: {exc}") from exc

        if response.status_code == 429 and attempt < len(retry_delays):
            delay = retry_delays[attempt]
            attempt += 1
            logger.warning("Gemini rate limited, retrying in %.1fs (attempt %d)", delay, attempt)
            sleep(delay)
            continue

        if response.status_code >= 400:
            raise GenerationError(f"Gemini API error {response.status_code}: {_error_message(response)}")

        try:
            data = response.json()
        except ValueError as exc:
            raise GenerationError(f"Failed to decode Gemini response: {exc}") from exc

        if not isinstance(data, dict):
            raise GenerationError("Gemini response must be a JSON object.")
        return data


def extract_text(response: Mapping[str, Any]) -> str:
    candidates = response.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        raise GenerationError("Gemini response missing candidates.")

    content = candidates[0].get("content") if isinstance(candidates[0], Mapping) else None
    parts = content.get("parts") if isinstance(content, Mapping) else None
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], Mapping):
        raise GenerationError("Gemini candidate missing content parts.")

    text = parts[0].get("text")
    if not isinstance(text, str):
        raise GenerationError("Gemini content part must contain text.")
    return text
