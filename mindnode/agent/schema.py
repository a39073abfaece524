import json
import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from ..errors import TreeFormatError
from ..map_components.core import NodeKind
from ..map_components.node import TreeNode, ensure_unique_ids


@dataclass
class MindMapAnswer:
    text: str
    mind_map: Optional[TreeNode] = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "MindMapAnswer":
        text = payload.get("text")
        if text is None:
            text = ""
        if not isinstance(text, str):
            raise TreeFormatError("Answer 'text' must be a string.")

        mind_map_payload = payload.get("mindMap")
        mind_map = None
        if mind_map_payload is not None:
            if not isinstance(mind_map_payload, Mapping):
                raise TreeFormatError("Answer 'mindMap' must be an object.")
            mind_map = TreeNode.from_dict(mind_map_payload)
            if "type" not in mind_map_payload:
                mind_map.kind = NodeKind.ROOT
            ensure_unique_ids(mind_map)

        return cls(text=text, mind_map=mind_map)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "mindMap": self.mind_map.to_dict() if self.mind_map is not None else None,
        }


_FENCED = re.compile(r"^\s*```(?:json)?\s*(.*?)\s*```\s*$", re.DOTALL | re.IGNORECASE)


def _load_json_object(content: str) -> Dict[str, Any]:
    # only an outer fence is removed; backticks inside JSON strings are data
    fenced = _FENCED.match(content)
    content = fenced.group(1) if fenced else content.strip()
    if not content:
        raise TreeFormatError("Model response is empty.")

    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        start = content.find("{")
        end = content.rfind("}")
        if start == -1 or end <= start:
            raise TreeFormatError(f"Model response is not valid JSON: {exc}") from exc
        try:
            data = json.loads(content[start : end + 1])
        except json.JSONDecodeError:
            raise TreeFormatError(f"Model response is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise TreeFormatError("Model response JSON must be an object.")
    return data


def parse_answer(content: str) -> MindMapAnswer:
    return MindMapAnswer.from_dict(_load_json_object(content))
