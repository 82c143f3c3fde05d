"""
namedreturns/type_info.py
═════════════════════════

Type-resolver side of the external front end.

The checks need exactly two answers from the type checker:

  1. *type identity*: is the declared type of this result the universe
     ``error`` type?  A user type that happens to be called ``error`` is
     a different type and must not match.
  2. *object identity*: does this identifier refer to the same binding
     as that declared variable?  A name re-declared in an inner scope is
     a different object even though the text is identical.

``TypeInfo`` stores both tables, keyed on syntax-tree nodes (nodes hash
by identity).  The front end, the dump loader, or a test fills them in.

License: MIT
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from namedreturns.go_ast import Ident, Node, Position, NO_POS


# ═════════════════════════════════════════════════════════════════════════
#  PART 1 — TYPES
# ═════════════════════════════════════════════════════════════════════════

class TypeKind(Enum):
    BASIC = "basic"
    NAMED = "named"
    POINTER = "pointer"
    SLICE = "slice"
    ARRAY = "array"
    MAP = "map"
    INTERFACE = "interface"
    SIGNATURE = "signature"


_type_ids = itertools.count(1)


@dataclass(eq=False)
class Type:
    """
    A resolved type.

    ``NAMED`` types are identical only to themselves; every other kind is
    compared structurally by :func:`identical`.

    children:
      - POINTER / SLICE: [elem]
      - ARRAY:           [elem], ``length`` set
      - MAP:             [key, value]
      - SIGNATURE:       params + results, ``n_params`` splits them
    """
    kind: TypeKind
    name: str = ""
    package: str = ""
    children: List["Type"] = field(default_factory=list)
    length: int = -1
    n_params: int = 0
    underlying: Optional["Type"] = None
    uid: int = field(default_factory=lambda: next(_type_ids))

    def __str__(self) -> str:
        k = self.kind
        if k in (TypeKind.BASIC, TypeKind.NAMED):
            return f"{self.package}.{self.name}" if self.package else self.name
        if k is TypeKind.POINTER:
            return "*" + str(self.children[0])
        if k is TypeKind.SLICE:
            return "[]" + str(self.children[0])
        if k is TypeKind.ARRAY:
            return f"[{self.length}]{self.children[0]}"
        if k is TypeKind.MAP:
            return f"map[{self.children[0]}]{self.children[1]}"
        if k is TypeKind.INTERFACE:
            return "interface{...}" if self.name else "interface{}"
        params = ", ".join(str(t) for t in self.children[: self.n_params])
        results = ", ".join(str(t) for t in self.children[self.n_params:])
        return f"func({params}) ({results})" if results else f"func({params})"


def basic(name: str) -> Type:
    return Type(kind=TypeKind.BASIC, name=name)


def named(name: str, package: str = "", underlying: Optional[Type] = None) -> Type:
    return Type(kind=TypeKind.NAMED, name=name, package=package, underlying=underlying)


def pointer(elem: Type) -> Type:
    return Type(kind=TypeKind.POINTER, children=[elem])


def slice_of(elem: Type) -> Type:
    return Type(kind=TypeKind.SLICE, children=[elem])


def map_of(key: Type, value: Type) -> Type:
    return Type(kind=TypeKind.MAP, children=[key, value])


# The predeclared ``error`` type. There is exactly one.
ERROR_TYPE: Type = named(
    "error",
    underlying=Type(kind=TypeKind.INTERFACE, name="Error() string"),
)

UNIVERSE: Dict[str, Type] = {
    "error": ERROR_TYPE,
    **{n: basic(n) for n in (
        "bool", "string", "int", "int8", "int16", "int32", "int64",
        "uint", "uint8", "uint16", "uint32", "uint64", "uintptr",
        "float32", "float64", "complex64", "complex128", "byte", "rune",
        "any",
    )},
}


def identical(a: Optional[Type], b: Optional[Type]) -> bool:
    """Go's type identity, restricted to the kinds modelled here."""
    if a is None or b is None:
        return False
    if a is b:
        return True
    if a.kind is not b.kind:
        return False
    if a.kind is TypeKind.NAMED:
        return False
    if a.kind is TypeKind.BASIC:
        return a.name == b.name
    if a.kind is TypeKind.ARRAY and a.length != b.length:
        return False
    if a.kind is TypeKind.SIGNATURE and a.n_params != b.n_params:
        return False
    if a.kind is TypeKind.INTERFACE:
        return a.name == b.name
    if len(a.children) != len(b.children):
        return False
    return all(identical(x, y) for x, y in zip(a.children, b.children))


# ═════════════════════════════════════════════════════════════════════════
#  PART 2 — OBJECTS
# ═════════════════════════════════════════════════════════════════════════

@dataclass(eq=False)
class Object:
    """A binding introduced by a declaration (variable, parameter, result)."""
    name: str
    type: Optional[Type] = None
    pos: Position = NO_POS

    def __repr__(self) -> str:
        return f"<Object {self.name} {self.type} @ {self.pos}>"


# ═════════════════════════════════════════════════════════════════════════
#  PART 3 — TYPE INFO TABLES
# ═════════════════════════════════════════════════════════════════════════

class TypeInfo:
    """
    Resolver results for one compilation unit.

    types : expression node → Type
    defs  : identifier → Object it declares
    uses  : identifier → Object it refers to
    """

    def __init__(self) -> None:
        self.types: Dict[Node, Type] = {}
        self.defs: Dict[Ident, Object] = {}
        self.uses: Dict[Ident, Object] = {}

    def type_of(self, expr: Optional[Node]) -> Optional[Type]:
        if expr is None:
            return None
        t = self.types.get(expr)
        if t is not None:
            return t
        obj = self.object_of(expr) if isinstance(expr, Ident) else None
        if obj is not None:
            return obj.type
        return None

    def object_of(self, ident: Ident) -> Optional[Object]:
        obj = self.defs.get(ident)
        if obj is not None:
            return obj
        return self.uses.get(ident)

    # ── recording (front end side) ───────────────────────────────────────

    def record_type(self, expr: Node, typ: Type) -> None:
        self.types[expr] = typ

    def define(self, ident: Ident, typ: Optional[Type] = None) -> Object:
        """Record ``ident`` as declaring a fresh object and return it."""
        obj = Object(name=ident.name, type=typ, pos=ident.pos)
        self.defs[ident] = obj
        return obj

    def use(self, ident: Ident, obj: Object) -> None:
        self.uses[ident] = obj
