"""
namedreturns/ast_helper.py
══════════════════════════

Traversal utilities over the ``go_ast`` node model.

    ┌─────────────────────────────────────────────────────────────────┐
    │  inspect(node, fn)        pre-order walk; fn returns False to   │
    │                           skip a node's children                │
    │  iter_preorder(node)      plain pre-order iterator              │
    │  Inspector(files)         filtered pre-order over a whole unit  │
    └─────────────────────────────────────────────────────────────────┘

All walks are iterative so deeply nested bodies do not hit the
recursion limit.

License: MIT
"""

from __future__ import annotations

from typing import Callable, Iterable, Iterator, List, Optional, Sequence, Type

from namedreturns.go_ast import File, Node


# ═════════════════════════════════════════════════════════════════════════
#  PART 1 — WALKS
# ═════════════════════════════════════════════════════════════════════════

def iter_preorder(root: Optional[Node]) -> Iterator[Node]:
    """
    Iterate over nodes in pre-order (node, then children left to right).

    Example:
        >>> for node in iter_preorder(fn.body):
        ...     print(type(node).__name__)
    """
    if root is None:
        return
    stack: List[Node] = [root]
    while stack:
        node = stack.pop()
        yield node
        # Push in reverse so the first child is processed first (LIFO)
        stack.extend(reversed(list(node.children())))


def inspect(root: Optional[Node], fn: Callable[[Node], bool]) -> None:
    """
    Pre-order walk calling ``fn`` on every node.

    When ``fn`` returns False the node's children are not visited.
    """
    if root is None:
        return
    stack: List[Node] = [root]
    while stack:
        node = stack.pop()
        if fn(node):
            stack.extend(reversed(list(node.children())))


def find_first(root: Optional[Node], pred: Callable[[Node], bool]) -> Optional[Node]:
    """Return the first node (pre-order) satisfying ``pred``, or None."""
    for node in iter_preorder(root):
        if pred(node):
            return node
    return None


# ═════════════════════════════════════════════════════════════════════════
#  PART 2 — INSPECTOR
# ═════════════════════════════════════════════════════════════════════════

class Inspector:
    """
    Filtered pre-order traversal over the files of one compilation unit.

    The node list is flattened once at construction, so repeated
    ``preorder`` calls (one per checker) do not re-walk the trees.
    """

    def __init__(self, files: Iterable[File]) -> None:
        self._events: List[Node] = []
        for f in files:
            self._events.extend(iter_preorder(f))

    def preorder(self, node_types: Sequence[Type[Node]],
                 fn: Callable[[Node], None]) -> None:
        """Call ``fn`` for every node whose type is in ``node_types``."""
        wanted = tuple(node_types)
        for node in self._events:
            if not wanted or isinstance(node, wanted):
                fn(node)

    def __len__(self) -> int:
        return len(self._events)
