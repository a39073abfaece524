import json

import pytest

from mindnode import NodeKind
from mindnode.agent import answer_question, build_prompt, extract_text, generate_content, parse_answer, summarize
from mindnode.agent.generator import FALLBACK_ANSWER, FALLBACK_SUMMARY
from mindnode.errors import DuplicateNodeError, GenerationError, TreeFormatError

ANSWER = {
    "text": "Kerberoasting requests service tickets.",
    "mindMap": {
        "id": "root",
        "label": "Kerberoasting",
        "type": "root",
        "children": [
            {
                "id": "rubeus",
                "label": "Rubeus",
                "type": "child",
                "children": [{"id": "cmd", "label": "Rubeus.exe kerberoast", "type": "code", "children": []}],
            }
        ],
    },
}


def _gemini_response(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class FakeResponse:
    def __init__(self, status_code: int, payload=None, text: str = ""):
        self.status_code = status_code
        self._payload = payload
        self.text = text or (json.dumps(payload) if payload is not None else "")

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def post(self, url, headers=None, data=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "body": json.loads(data), "timeout": timeout})
        return self.responses.pop(0)


def test_generate_content_injects_system_instruction():
    session = FakeSession(FakeResponse(200, _gemini_response("{}")))
    data = generate_content({"contents": []}, api_key="k", session=session, model="m1")
    assert data["candidates"]
    call = session.calls[0]
    assert call["url"].endswith("/models/m1:generateContent")
    assert call["headers"]["x-goog-api-key"] == "k"
    assert "mind map generator" in call["body"]["systemInstruction"]["parts"][0]["text"]


def test_generate_content_retries_rate_limits():
    delays = []
    session = FakeSession(FakeResponse(429, {"error": "slow down"}), FakeResponse(429), FakeResponse(200, {"ok": 1}))
    data = generate_content({}, api_key="k", session=session, sleep=delays.append)
    assert data == {"ok": 1}
    assert delays == [1.0, 2.0]
    assert len(session.calls) == 3


def test_generate_content_gives_up_after_retry_budget():
    session = FakeSession(FakeResponse(429), FakeResponse(429))
    with pytest.raises(GenerationError, match="429"):
        generate_content({}, api_key="k", session=session, retry_delays=(0.5,), sleep=lambda _: None)


def test_generate_content_reports_client_errors():
    session = FakeSession(FakeResponse(400, {"error": {"message": "bad request"}}))
    with pytest.raises(GenerationError, match="bad request"):
        generate_content({}, api_key="k", session=session)


def test_missing_api_key(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    with pytest.raises(GenerationError):
        generate_content({}, session=FakeSession())


def test_api_key_from_environment(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "env-key")
    session = FakeSession(FakeResponse(200, {}))
    generate_content({}, session=session, system_prompt=None)
    assert session.calls[0]["headers"]["x-goog-api-key"] == "env-key"
    assert "systemInstruction" not in session.calls[0]["body"]


def test_extract_text_rejects_empty_candidates():
    assert extract_text(_gemini_response("hi")) == "hi"
    with pytest.raises(GenerationError):
        extract_text({"candidates": []})
    with pytest.raises(GenerationError):
        extract_text({"candidates": [{"content": {"parts": [{"inlineData": {}}]}}]})


def test_parse_answer_handles_code_fences_and_noise():
    content = "Sure!\n```json\n" + json.dumps(ANSWER) + "\n```"
    answer = parse_answer(content)
    assert answer.text.startswith("Kerberoasting")
    assert answer.mind_map.children[0].children[0].kind is NodeKind.CODE
    assert answer.to_dict()["mindMap"]["id"] == "root"


def test_parse_answer_keeps_backticks_inside_labels():
    payload = json.loads(json.dumps(ANSWER))
    payload["mindMap"]["children"][0]["children"][0]["label"] = "```json {}```"
    for content in (json.dumps(payload), "```json\n" + json.dumps(payload) + "\n```"):
        answer = parse_answer(content)
        assert answer.mind_map.find("cmd").label == "```json {}```"


def test_parse_answer_without_mind_map():
    answer = parse_answer('{"text": "Not in the source.", "mindMap": null}')
    assert answer.mind_map is None


def test_parse_answer_rejects_bad_payloads():
    with pytest.raises(TreeFormatError):
        parse_answer("")
    with pytest.raises(TreeFormatError):
        parse_answer("not json at all")
    with pytest.raises(TreeFormatError):
        parse_answer("[1, 2]")
    duplicate = {"text": "", "mindMap": {"id": "a", "label": "A", "children": [{"id": "a", "label": "again"}]}}
    with pytest.raises(DuplicateNodeError):
        parse_answer(json.dumps(duplicate))


def test_root_without_type_defaults_to_root_kind():
    answer = parse_answer('{"text": "t", "mindMap": {"id": "x", "label": "Top"}}')
    assert answer.mind_map.kind is NodeKind.ROOT


def test_build_prompt_truncates_context():
    prompt = build_prompt("What?", "z" * 40000)
    assert prompt.count("z") == 30000
    assert "User Question: What?" in prompt
    assert "No source material provided." in build_prompt("What?")


def test_answer_question_parses_model_output():
    received = {}

    def client(payload, **kwargs):
        received.update(payload)
        return _gemini_response(json.dumps(ANSWER))

    answer = answer_question("How?", "source text", client=client)
    assert answer.mind_map.id == "root"
    assert received["generationConfig"] == {"responseMimeType": "application/json"}
    assert "source text" in received["contents"][0]["parts"][0]["text"]


def test_answer_question_falls_back_on_failure():
    def client(payload, **kwargs):
        return _gemini_response("garbage")

    answer = answer_question("How?", client=client)
    assert answer.text == FALLBACK_ANSWER
    assert answer.mind_map is None

    with pytest.raises(TreeFormatError):
        answer_question("How?", client=client, strict=True)


def test_summarize_returns_text_or_fallback():
    def ok_client(payload, **kwargs):
        assert kwargs["system_prompt"] is None
        return _gemini_response("- point")

    def failing_client(payload, **kwargs):
        raise GenerationError("down")

    assert summarize("long text", client=ok_client) == "- point"
    assert summarize("long text", client=failing_client) == FALLBACK_SUMMARY
