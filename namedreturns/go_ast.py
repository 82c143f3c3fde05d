"""
namedreturns/go_ast.py
══════════════════════

Syntax-tree node model handed over by the external front end.

The checker never parses source text.  A front end (the Go toolchain, a
dump exporter, or a test building trees by hand) produces these nodes
with positions already resolved; the checker only walks them.

Node shapes mirror Go's syntax tree, minus comments and Bad* nodes, so
that any well-typed file a front end exports can be represented:

    ┌──────────────────────────────────────────────────────────────┐
    │  Declarations   File, FuncDecl, GenDecl, ValueSpec,          │
    │                 TypeSpec, ImportSpec                         │
    │  Signatures     FuncType, FieldList, Field                   │
    │  Statements     BlockStmt, ReturnStmt, AssignStmt, DeclStmt, │
    │                 IfStmt, ForStmt, RangeStmt, DeferStmt,       │
    │                 SwitchStmt, TypeSwitchStmt, SelectStmt, ...  │
    │  Expressions    Ident, BasicLit, CallExpr, FuncLit,          │
    │                 SliceExpr, TypeAssertExpr, ...               │
    └──────────────────────────────────────────────────────────────┘

Child order
───────────
Dataclass field order *is* the walk order: ``children()`` yields node
valued fields (and node lists) in declaration order, so every node class
lists its fields in the order Go's own ``ast.Inspect`` visits them.

License: MIT
"""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass, field
from typing import ClassVar, Dict, Iterator, List, Optional, Type


# ═════════════════════════════════════════════════════════════════════════
#  PART 1 — POSITIONS
# ═════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, order=True)
class Position:
    """A resolved source position (``file:line:column``)."""
    filename: str = ""
    line: int = 0
    column: int = 0

    def is_valid(self) -> bool:
        return self.line > 0

    def __str__(self) -> str:
        if not self.is_valid():
            return self.filename or "-"
        if self.column:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.filename}:{self.line}"


NO_POS = Position()


# ═════════════════════════════════════════════════════════════════════════
#  PART 2 — BASE NODE
# ═════════════════════════════════════════════════════════════════════════

# Registry of node classes by name; the dump loader decodes through it.
NODE_TYPES: Dict[str, Type["Node"]] = {}


@dataclass(eq=False)
class Node:
    """
    Base class for every syntax-tree node.

    Nodes compare by identity: two textually identical identifiers at
    different places are different nodes, and the type resolver keys
    its tables on the node objects themselves.
    """

    _skip_fields: ClassVar[frozenset] = frozenset({"pos"})

    def __init_subclass__(cls, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        NODE_TYPES[cls.__name__] = cls

    def children(self) -> Iterator["Node"]:
        """Yield direct child nodes in walk order."""
        for f in dataclasses.fields(self):
            if f.name in self._skip_fields:
                continue
            value = getattr(self, f.name)
            if isinstance(value, Node):
                yield value
            elif isinstance(value, list):
                for item in value:
                    if isinstance(item, Node):
                        yield item

    @property
    def position(self) -> Position:
        return getattr(self, "pos", NO_POS)


# ═════════════════════════════════════════════════════════════════════════
#  PART 3 — EXPRESSIONS
# ═════════════════════════════════════════════════════════════════════════

@dataclass(eq=False)
class Ident(Node):
    name: str = ""
    pos: Position = NO_POS

    def __repr__(self) -> str:
        return f"Ident({self.name!r} @ {self.pos})"


@dataclass(eq=False)
class BasicLit(Node):
    kind: str = "INT"           # INT, FLOAT, STRING, CHAR
    value: str = ""
    pos: Position = NO_POS


@dataclass(eq=False)
class Ellipsis(Node):
    elt: Optional[Node] = None
    pos: Position = NO_POS


@dataclass(eq=False)
class ParenExpr(Node):
    x: Optional[Node] = None
    pos: Position = NO_POS


@dataclass(eq=False)
class SelectorExpr(Node):
    x: Optional[Node] = None
    sel: Optional[Ident] = None
    pos: Position = NO_POS


@dataclass(eq=False)
class IndexExpr(Node):
    x: Optional[Node] = None
    index: Optional[Node] = None
    pos: Position = NO_POS


@dataclass(eq=False)
class IndexListExpr(Node):
    """``x[A, B]``: generic instantiation with several type arguments."""
    x: Optional[Node] = None
    indices: List[Node] = field(default_factory=list)
    pos: Position = NO_POS


@dataclass(eq=False)
class SliceExpr(Node):
    x: Optional[Node] = None
    low: Optional[Node] = None
    high: Optional[Node] = None
    max: Optional[Node] = None
    slice3: bool = False        # x[low:high:max]
    pos: Position = NO_POS


@dataclass(eq=False)
class TypeAssertExpr(Node):
    x: Optional[Node] = None
    type: Optional[Node] = None     # None for x.(type) in a type switch
    pos: Position = NO_POS


@dataclass(eq=False)
class StarExpr(Node):
    x: Optional[Node] = None
    pos: Position = NO_POS


@dataclass(eq=False)
class UnaryExpr(Node):
    op: str = ""
    x: Optional[Node] = None
    pos: Position = NO_POS


@dataclass(eq=False)
class BinaryExpr(Node):
    x: Optional[Node] = None
    op: str = ""
    y: Optional[Node] = None
    pos: Position = NO_POS


@dataclass(eq=False)
class KeyValueExpr(Node):
    key: Optional[Node] = None
    value: Optional[Node] = None
    pos: Position = NO_POS


@dataclass(eq=False)
class CompositeLit(Node):
    type: Optional[Node] = None
    elts: List[Node] = field(default_factory=list)
    pos: Position = NO_POS


@dataclass(eq=False)
class CallExpr(Node):
    fun: Optional[Node] = None
    args: List[Node] = field(default_factory=list)
    pos: Position = NO_POS


@dataclass(eq=False)
class ArrayType(Node):
    len: Optional[Node] = None      # None for slices
    elt: Optional[Node] = None
    pos: Position = NO_POS


@dataclass(eq=False)
class MapType(Node):
    key: Optional[Node] = None
    value: Optional[Node] = None
    pos: Position = NO_POS


@dataclass(eq=False)
class ChanType(Node):
    dir: str = ""               # "", "send", "recv"
    value: Optional[Node] = None
    pos: Position = NO_POS


@dataclass(eq=False)
class InterfaceType(Node):
    methods: Optional["FieldList"] = None
    pos: Position = NO_POS


@dataclass(eq=False)
class StructType(Node):
    fields: Optional["FieldList"] = None
    pos: Position = NO_POS


# ── Signatures ───────────────────────────────────────────────────────────

@dataclass(eq=False)
class Field(Node):
    """One parameter/result entry: zero or more names sharing one type."""
    names: List[Ident] = field(default_factory=list)
    type: Optional[Node] = None
    tag: Optional[BasicLit] = None      # struct fields only
    pos: Position = NO_POS


@dataclass(eq=False)
class FieldList(Node):
    list: List[Field] = field(default_factory=list)
    pos: Position = NO_POS


@dataclass(eq=False)
class FuncType(Node):
    type_params: Optional[FieldList] = None
    params: Optional[FieldList] = None
    results: Optional[FieldList] = None
    pos: Position = NO_POS


@dataclass(eq=False)
class FuncLit(Node):
    type: Optional[FuncType] = None
    body: Optional["BlockStmt"] = None
    pos: Position = NO_POS


# ═════════════════════════════════════════════════════════════════════════
#  PART 4 — STATEMENTS
# ═════════════════════════════════════════════════════════════════════════

@dataclass(eq=False)
class BlockStmt(Node):
    list: List[Node] = field(default_factory=list)
    pos: Position = NO_POS


@dataclass(eq=False)
class ExprStmt(Node):
    x: Optional[Node] = None
    pos: Position = NO_POS


@dataclass(eq=False)
class EmptyStmt(Node):
    pos: Position = NO_POS


@dataclass(eq=False)
class SendStmt(Node):
    chan: Optional[Node] = None
    value: Optional[Node] = None
    pos: Position = NO_POS


@dataclass(eq=False)
class IncDecStmt(Node):
    x: Optional[Node] = None
    tok: str = "++"
    pos: Position = NO_POS


@dataclass(eq=False)
class AssignStmt(Node):
    """``lhs tok rhs``; ``tok`` is ``":="`` for a short variable declaration."""
    lhs: List[Node] = field(default_factory=list)
    tok: str = "="
    rhs: List[Node] = field(default_factory=list)
    pos: Position = NO_POS

    @property
    def is_define(self) -> bool:
        return self.tok == DEFINE


@dataclass(eq=False)
class ValueSpec(Node):
    names: List[Ident] = field(default_factory=list)
    type: Optional[Node] = None
    values: List[Node] = field(default_factory=list)
    pos: Position = NO_POS


@dataclass(eq=False)
class TypeSpec(Node):
    name: Optional[Ident] = None
    type_params: Optional[FieldList] = None
    type: Optional[Node] = None
    pos: Position = NO_POS


@dataclass(eq=False)
class ImportSpec(Node):
    name: Optional[Ident] = None
    path: Optional[BasicLit] = None
    pos: Position = NO_POS


@dataclass(eq=False)
class GenDecl(Node):
    tok: str = "var"            # var, const, type, import
    specs: List[Node] = field(default_factory=list)
    pos: Position = NO_POS


@dataclass(eq=False)
class DeclStmt(Node):
    decl: Optional[GenDecl] = None
    pos: Position = NO_POS


@dataclass(eq=False)
class ReturnStmt(Node):
    results: List[Node] = field(default_factory=list)
    pos: Position = NO_POS

    @property
    def is_bare(self) -> bool:
        return not self.results


@dataclass(eq=False)
class DeferStmt(Node):
    call: Optional[CallExpr] = None
    pos: Position = NO_POS


@dataclass(eq=False)
class GoStmt(Node):
    call: Optional[CallExpr] = None
    pos: Position = NO_POS


@dataclass(eq=False)
class BranchStmt(Node):
    tok: str = "break"
    label: Optional[Ident] = None
    pos: Position = NO_POS


@dataclass(eq=False)
class LabeledStmt(Node):
    label: Optional[Ident] = None
    stmt: Optional[Node] = None
    pos: Position = NO_POS


@dataclass(eq=False)
class IfStmt(Node):
    init: Optional[Node] = None
    cond: Optional[Node] = None
    body: Optional[BlockStmt] = None
    else_: Optional[Node] = None
    pos: Position = NO_POS


@dataclass(eq=False)
class CaseClause(Node):
    exprs: List[Node] = field(default_factory=list)  # empty for default
    body: List[Node] = field(default_factory=list)
    pos: Position = NO_POS


@dataclass(eq=False)
class SwitchStmt(Node):
    init: Optional[Node] = None
    tag: Optional[Node] = None
    body: Optional[BlockStmt] = None
    pos: Position = NO_POS


@dataclass(eq=False)
class TypeSwitchStmt(Node):
    """``switch init; x := y.(type) {...}``; ``assign`` is the ``x := y.(type)`` part."""
    init: Optional[Node] = None
    assign: Optional[Node] = None       # AssignStmt or ExprStmt
    body: Optional[BlockStmt] = None
    pos: Position = NO_POS


@dataclass(eq=False)
class CommClause(Node):
    comm: Optional[Node] = None         # send or receive statement; None for default
    body: List[Node] = field(default_factory=list)
    pos: Position = NO_POS


@dataclass(eq=False)
class SelectStmt(Node):
    body: Optional[BlockStmt] = None
    pos: Position = NO_POS


@dataclass(eq=False)
class ForStmt(Node):
    init: Optional[Node] = None
    cond: Optional[Node] = None
    post: Optional[Node] = None
    body: Optional[BlockStmt] = None
    pos: Position = NO_POS


@dataclass(eq=False)
class RangeStmt(Node):
    key: Optional[Node] = None
    value: Optional[Node] = None
    tok: str = ":="             # ":=", "=" or "" when no bindings
    x: Optional[Node] = None
    body: Optional[BlockStmt] = None
    pos: Position = NO_POS


# ═════════════════════════════════════════════════════════════════════════
#  PART 5 — DECLARATIONS
# ═════════════════════════════════════════════════════════════════════════

@dataclass(eq=False)
class FuncDecl(Node):
    recv: Optional[FieldList] = None
    name: Optional[Ident] = None
    type: Optional[FuncType] = None
    body: Optional[BlockStmt] = None    # None for external declarations
    pos: Position = NO_POS


@dataclass(eq=False)
class File(Node):
    name: Optional[Ident] = None        # package clause
    decls: List[Node] = field(default_factory=list)
    filename: str = ""
    pos: Position = NO_POS

    _skip_fields: ClassVar[frozenset] = frozenset({"pos", "filename"})


DEFINE = ":="
ASSIGN = "="


# ═════════════════════════════════════════════════════════════════════════
#  PART 6 — EXPRESSION STRINGIFICATION
# ═════════════════════════════════════════════════════════════════════════

def _field_list_string(fields: List[Field], sep: str, iface: bool = False) -> str:
    parts: List[str] = []
    for f in fields:
        names = ", ".join(n.name for n in f.names)
        if iface and names and isinstance(f.type, FuncType):
            # interface method: name followed by its signature, no "func"
            parts.append(names + _signature_string(f.type))
            continue
        type_str = expr_string(f.type)
        parts.append(f"{names} {type_str}" if names else type_str)
    return sep.join(parts)


def _signature_string(ft: FuncType) -> str:
    out = "(" + _field_list_string(ft.params.list if ft.params else [], ", ") + ")"
    results = ft.results
    if results is None or not results.list:
        return out
    if len(results.list) == 1 and not results.list[0].names:
        return out + " " + expr_string(results.list[0].type)
    return out + " (" + _field_list_string(results.list, ", ") + ")"


def expr_string(expr: Optional[Node]) -> str:
    """
    Render an expression the way Go's ``types.ExprString`` does.

    Used for the type text inside diagnostic messages, so it must be
    stable: ``[]string``, ``map[string]int``, ``*pkg.T``, ``func(int) error``,
    ``struct{a int; b string}``, ``interface{Error() string}``.
    """
    if expr is None:
        return ""
    if isinstance(expr, Ident):
        return expr.name
    if isinstance(expr, BasicLit):
        return expr.value
    if isinstance(expr, StarExpr):
        return "*" + expr_string(expr.x)
    if isinstance(expr, SelectorExpr):
        return f"{expr_string(expr.x)}.{expr_string(expr.sel)}"
    if isinstance(expr, ParenExpr):
        return f"({expr_string(expr.x)})"
    if isinstance(expr, Ellipsis):
        return "..." + expr_string(expr.elt)
    if isinstance(expr, ArrayType):
        return f"[{expr_string(expr.len)}]{expr_string(expr.elt)}"
    if isinstance(expr, MapType):
        return f"map[{expr_string(expr.key)}]{expr_string(expr.value)}"
    if isinstance(expr, ChanType):
        if expr.dir == "send":
            return "chan<- " + expr_string(expr.value)
        if expr.dir == "recv":
            return "<-chan " + expr_string(expr.value)
        return "chan " + expr_string(expr.value)
    if isinstance(expr, IndexExpr):
        return f"{expr_string(expr.x)}[{expr_string(expr.index)}]"
    if isinstance(expr, IndexListExpr):
        return f"{expr_string(expr.x)}[{', '.join(expr_string(i) for i in expr.indices)}]"
    if isinstance(expr, SliceExpr):
        out = f"{expr_string(expr.x)}[{expr_string(expr.low)}:{expr_string(expr.high)}"
        if expr.slice3:
            out += ":" + expr_string(expr.max)
        return out + "]"
    if isinstance(expr, TypeAssertExpr):
        return f"{expr_string(expr.x)}.({expr_string(expr.type) if expr.type else 'type'})"
    if isinstance(expr, KeyValueExpr):
        return f"{expr_string(expr.key)}: {expr_string(expr.value)}"
    if isinstance(expr, UnaryExpr):
        return expr.op + expr_string(expr.x)
    if isinstance(expr, BinaryExpr):
        return f"{expr_string(expr.x)} {expr.op} {expr_string(expr.y)}"
    if isinstance(expr, CallExpr):
        args = ", ".join(expr_string(a) for a in expr.args)
        return f"{expr_string(expr.fun)}({args})"
    if isinstance(expr, InterfaceType):
        methods = expr.methods.list if expr.methods else []
        return "interface{" + _field_list_string(methods, "; ", iface=True) + "}"
    if isinstance(expr, StructType):
        fields = expr.fields.list if expr.fields else []
        return "struct{" + _field_list_string(fields, "; ") + "}"
    if isinstance(expr, FuncType):
        return "func" + _signature_string(expr)
    if isinstance(expr, FuncLit):
        return f"({expr_string(expr.type)} literal)"
    if isinstance(expr, CompositeLit):
        return expr_string(expr.type) + ("{…}" if expr.elts else "{}")
    return f"<{type(expr).__name__}>"


def go_quote(text: str) -> str:
    """Quote like Go's ``%q`` verb: double quotes, backslash escapes."""
    return json.dumps(text, ensure_ascii=False)
