"""
Merkle Tree Visualization Module

This module renders a Merkle tree and the path of an inclusion proof with
rich, helping users understand how a leaf is folded into the root and which
siblings the proof carries.
"""

from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree


def _short(digest_hex: str, width: int = 16) -> str:
    if len(digest_hex) <= width:
        return digest_hex
    return f"{digest_hex[:width // 2]}…{digest_hex[-(width // 2):]}"


def path_positions(leaf_index: int, level_sizes: List[int]) -> List[int]:
    """Position of the tracked node on every level, leaf level first."""
    positions = []
    index = leaf_index
    for _ in level_sizes:
        positions.append(index)
        index //= 2
    return positions


def build_tree_view(levels: List[List[str]], leaf_index: Optional[int] = None) -> Tree:
    """
    Build a rich Tree of every level, root at the top.

    Nodes on the proof path are highlighted in green, their recorded
    siblings in yellow. A duplicated trailing node is marked "(dup)".

    Args:
        levels: Tree levels as hex text, levels[0] being the leaves
        leaf_index: Optional leaf whose proof path should be highlighted
    """
    positions = path_positions(leaf_index, [len(level) for level in levels]) if leaf_index is not None else []

    root_label = f"[bold]root[/bold] {levels[-1][0]}"
    view = Tree(f"🌳 {root_label}")

    def add_children(branch: Tree, depth: int, position: int):
        if depth == 0:
            return
        below = levels[depth - 1]
        left = 2 * position
        for child in (left, left + 1):
            duplicated = child >= len(below)
            actual = left if duplicated else child
            label = f"L{depth - 1}[{actual}] {_short(below[actual])}"
            if duplicated:
                label += " (dup)"
            if positions and positions[depth - 1] == child and not duplicated:
                label = f"[green]{label}[/green]"
            elif positions and depth - 1 < len(positions) and positions[depth - 1] ^ 1 == child:
                label = f"[yellow]{label}[/yellow]"
            node = branch.add(label)
            if not duplicated:
                add_children(node, depth - 1, child)

    add_children(view, len(levels) - 1, 0)
    return view


def proof_table(proof: List[str], leaf_index: int) -> Table:
    """Tabulate the proof steps and which side each sibling sits on."""
    table = Table(title=f"Proof for leaf {leaf_index}")
    table.add_column("Step", style="cyan", justify="right")
    table.add_column("Side", style="magenta")
    table.add_column("Sibling", style="green")

    index = leaf_index
    for step, sibling in enumerate(proof):
        table.add_row(str(step), "left" if index % 2 == 1 else "right", sibling)
        index //= 2
    return table


def visualize_merkle_proof(
    levels: List[List[str]],
    leaf_index: Optional[int] = None,
    proof: Optional[List[str]] = None,
    console: Optional[Console] = None,
):
    """
    Print the tree, and the proof path when a leaf is selected.

    Args:
        levels: Tree levels as hex text, leaves first
        leaf_index: Leaf whose proof should be shown
        proof: Sibling hashes for that leaf
        console: Console to print to (a new one by default)
    """
    console = console or Console()
    leaf_count = len(levels[0])
    console.print(Panel(
        f"Leaves: {leaf_count}\n"
        f"Depth: {len(levels) - 1}\n"
        f"Root: {levels[-1][0]}",
        title="Merkle Tree",
        border_style="green",
    ))
    console.print(build_tree_view(levels, leaf_index))

    if leaf_index is not None and proof is not None:
        console.print(proof_table(proof, leaf_index))
        console.print(f"[green]✅ {len(proof)}-step proof for leaf {leaf_index}[/green]")
