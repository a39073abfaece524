import logging
import sys
from pathlib import Path
from typing import Optional

from rich import print

from mindnode.agent import answer_question
from mindnode.errors import MindMapError
from mindnode.mind_map import MindMapSession, print_map


def load_context(path: Optional[str]) -> str:
    if not path:
        return ""
    return Path(path).read_text(encoding="utf-8")


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    if len(sys.argv) < 2:
        print("[red]Usage:[/] gemini_mind_map.py QUESTION [SOURCE_FILE]")
        return

    question = sys.argv[1]
    context = load_context(sys.argv[2] if len(sys.argv) > 2 else None)
    print(f"[bold cyan]Question:[/] {question}\n")

    try:
        answer = answer_question(question, context, strict=True)
    except MindMapError as exc:
        print(f"[red]Gemini request failed:[/] {exc}")
        return

    print(answer.text + "\n")
    if answer.mind_map is None:
        print("[yellow]No mind map in the answer.[/]")
        return

    session = MindMapSession(answer.mind_map)
    session.expand_all()
    print_map(session)


if __name__ == "__main__":
    main()
