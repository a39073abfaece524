import sys
from pathlib import Path

from rich import print

from mindnode.mind_map import MindMapSession, TreeNode, render_svg


def main() -> None:
    output = Path(sys.argv[1] if len(sys.argv) > 1 else "mindmap.svg")

    root = TreeNode("root", "Release checklist", "root")
    build = root.add("Build", node_id="build")
    build.add_code("python -m build", node_id="build-cmd")
    publish = root.add("Publish", node_id="publish")
    publish.add_code("twine upload dist/*", node_id="publish-cmd")

    session = MindMapSession(root)
    session.expand_all()
    output.write_text(render_svg(session.layout, title="Release checklist"), encoding="utf-8")
    print(f"[bold green]Wrote[/] {output} ({len(session.layout.nodes)} nodes)")


if __name__ == "__main__":
    main()
