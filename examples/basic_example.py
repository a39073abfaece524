from rich import print

from mindnode.mind_map import MindMapSession, NodeKind, TreeNode, print_map


def build_tree() -> TreeNode:
    root = TreeNode("root", "Active Directory Attacks", NodeKind.ROOT)

    kerberos = root.add("Kerberoasting", node_id="kerberos")
    rubeus = kerberos.add("Rubeus", node_id="rubeus")
    rubeus.add_code("Rubeus.exe kerberoast /outfile:hashes.txt", node_id="rubeus-cmd")
    kerberos.add("Crack offline", node_id="crack")

    delegation = root.add("Delegation", node_id="delegation")
    delegation.add("Unconstrained", node_id="unconstrained")
    delegation.add("Constrained", node_id="constrained")

    root.add("Password spraying", node_id="spray")
    return root


def main() -> None:
    session = MindMapSession(build_tree())

    print("[bold cyan]Initial view (grandchildren collapsed):[/bold cyan]\n")
    print_map(session)

    print("\n" + "=" * 40 + "\n")

    session.on_toggle("kerberos")
    session.on_toggle("rubeus")
    print("[bold green]Kerberoasting expanded:[/bold green]\n")
    print_map(session)


if __name__ == "__main__":
    main()
