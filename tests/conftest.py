# tests/conftest.py
"""
Shared fixtures: a small builder for hand-made syntax trees.

The builder plays the front end.  It creates nodes with explicit
positions and fills the TypeInfo tables the way a type checker would:
result names *define* objects, later references *use* them, and a
``:=`` re-declaration defines a fresh object under the same name.
"""

from typing import Dict, List, Optional

import pytest

from namedreturns.checkers import CompilationUnit
from namedreturns.go_ast import (
    AssignStmt,
    BasicLit,
    BinaryExpr,
    BlockStmt,
    CallExpr,
    CaseClause,
    CommClause,
    DeclStmt,
    DeferStmt,
    ExprStmt,
    Field,
    FieldList,
    File,
    ForStmt,
    FuncDecl,
    FuncLit,
    FuncType,
    GenDecl,
    Ident,
    IfStmt,
    Node,
    Position,
    RangeStmt,
    ReturnStmt,
    SelectStmt,
    SendStmt,
    TypeAssertExpr,
    TypeSwitchStmt,
    ValueSpec,
)
from namedreturns.type_info import UNIVERSE, Object, TypeInfo, named


class GoBuilder:
    """Builds Go-shaped trees with resolver tables, one file per builder."""

    def __init__(self, filename: str = "p.go") -> None:
        self.filename = filename
        self.info = TypeInfo()
        self.objects: Dict[str, Object] = {}
        self._col = 0

    # ── positions ────────────────────────────────────────────────────────

    def p(self, line: int, col: int = 1) -> Position:
        return Position(self.filename, line, col)

    def _next_col(self) -> int:
        self._col += 2
        return self._col

    # ── types & identifiers ──────────────────────────────────────────────

    def typ(self, name: str, line: int = 1) -> Ident:
        """A type expression resolved through the universe scope."""
        ident = Ident(name, self.p(line, self._next_col()))
        self.info.record_type(ident, UNIVERSE.get(name) or named(name, "p"))
        return ident

    def user_error_type(self, line: int = 1) -> Ident:
        """A package-level type that is merely *called* error."""
        ident = Ident("error", self.p(line, self._next_col()))
        self.info.record_type(ident, named("error", "p"))
        return ident

    def define(self, name: str, line: int = 1, col: Optional[int] = None,
               type_name: Optional[str] = None) -> Ident:
        ident = Ident(name, self.p(line, col if col is not None else self._next_col()))
        typ = UNIVERSE.get(type_name) if type_name else None
        self.objects[name] = self.info.define(ident, typ)
        return ident

    def ref(self, name: str, line: int = 1, col: Optional[int] = None) -> Ident:
        ident = Ident(name, self.p(line, col if col is not None else self._next_col()))
        obj = self.objects.get(name)
        if obj is not None:
            self.info.use(ident, obj)
        return ident

    def lit(self, value: str = "0", line: int = 1) -> BasicLit:
        return BasicLit("INT", value, self.p(line, self._next_col()))

    # ── signatures ───────────────────────────────────────────────────────

    def result(self, *names: str, type: str = "int", line: int = 1,
               type_expr: Optional[Node] = None) -> Field:
        if type_expr is None:
            type_expr = self.typ(type, line)
        idents = [self.define(n, line, type_name=type) for n in names]
        return Field(idents, type_expr, pos=self.p(line))

    def unnamed(self, type: str = "int", line: int = 1) -> Field:
        return Field([], self.typ(type, line), pos=self.p(line))

    # ── statements ───────────────────────────────────────────────────────

    def ret(self, *exprs: Node, line: int = 1) -> ReturnStmt:
        return ReturnStmt(list(exprs), self.p(line))

    def assign(self, lhs: List[Node], rhs: List[Node], line: int = 1) -> AssignStmt:
        return AssignStmt(lhs, "=", rhs, self.p(line))

    def short_decl(self, name: str, line: int = 1, col: int = 2) -> AssignStmt:
        ident = Ident(name, self.p(line, col))
        self.info.define(ident, None)
        return AssignStmt([ident], ":=", [self.lit(line=line)], self.p(line, col))

    def var_decl(self, name: str, type: str = "int", line: int = 1, col: int = 6) -> DeclStmt:
        ident = Ident(name, self.p(line, col))
        self.info.define(ident, UNIVERSE.get(type))
        spec = ValueSpec([ident], self.typ(type, line), [], self.p(line, col))
        return DeclStmt(GenDecl("var", [spec], self.p(line)), self.p(line))

    def block(self, *stmts: Node, line: int = 1) -> BlockStmt:
        return BlockStmt(list(stmts), self.p(line))

    def if_(self, *stmts: Node, line: int = 1) -> IfStmt:
        cond = BinaryExpr(self.lit(line=line), "==", self.lit(line=line), self.p(line))
        return IfStmt(None, cond, self.block(*stmts, line=line), None, self.p(line))

    def defer_closure(self, *stmts: Node, line: int = 1) -> DeferStmt:
        fn = FuncLit(FuncType(params=FieldList([]), pos=self.p(line)),
                     self.block(*stmts, line=line), self.p(line, 8))
        return DeferStmt(CallExpr(fn, [], self.p(line, 8)), self.p(line))

    def call(self, name: str = "work", line: int = 1) -> ExprStmt:
        return ExprStmt(CallExpr(Ident(name, self.p(line)), [], self.p(line)), self.p(line))

    def range_(self, key: Optional[Ident], value: Optional[Ident], *stmts: Node,
               line: int = 1, tok: str = ":=") -> RangeStmt:
        return RangeStmt(key, value, tok, Ident("xs", self.p(line)),
                         self.block(*stmts, line=line), self.p(line))

    def for_(self, init: Optional[Node], *stmts: Node, line: int = 1) -> ForStmt:
        return ForStmt(init, None, None, self.block(*stmts, line=line), self.p(line))

    def type_switch(self, binding: Optional[str], *clauses: CaseClause,
                    line: int = 1, col: int = 9) -> TypeSwitchStmt:
        """``switch binding := v.(type) { clauses }``; no binding means ``switch v.(type)``."""
        guard = TypeAssertExpr(Ident("v", self.p(line)), None, self.p(line))
        if binding is None:
            assign: Node = ExprStmt(guard, self.p(line))
        else:
            ident = Ident(binding, self.p(line, col))
            self.info.define(ident, None)
            assign = AssignStmt([ident], ":=", [guard], self.p(line, col))
        return TypeSwitchStmt(None, assign, self.block(*clauses, line=line), self.p(line))

    def case(self, *stmts: Node, line: int = 1) -> CaseClause:
        return CaseClause([self.typ("int", line)], list(stmts), self.p(line))

    def select(self, *clauses: CommClause, line: int = 1) -> SelectStmt:
        return SelectStmt(self.block(*clauses, line=line), self.p(line))

    def comm(self, *stmts: Node, line: int = 1) -> CommClause:
        """``case ch <- 1:`` followed by ``stmts``."""
        send = SendStmt(Ident("ch", self.p(line)), self.lit(line=line), self.p(line))
        return CommClause(send, list(stmts), self.p(line))

    # ── functions & units ────────────────────────────────────────────────

    def _signature(self, results: Optional[List[Field]], pos: Position) -> FuncType:
        return FuncType(
            params=FieldList([], pos),
            results=FieldList(results, pos) if results is not None else None,
            pos=pos,
        )

    def func(self, name: str, results: Optional[List[Field]], body: Optional[List[Node]],
             line: int = 1) -> FuncDecl:
        ftype = self._signature(results, self.p(line))
        block = self.block(*body, line=line) if body is not None else None
        return FuncDecl(None, Ident(name, self.p(line, 6)), ftype, block, self.p(line))

    def func_lit(self, results: Optional[List[Field]], body: List[Node],
                 line: int = 1, col: int = 1) -> FuncLit:
        ftype = self._signature(results, self.p(line, col))
        return FuncLit(ftype, self.block(*body, line=line), self.p(line, col))

    def file(self, *decls: Node) -> File:
        return File(Ident("p", self.p(1, 9)), list(decls), self.filename, self.p(1))

    def unit(self, *decls: Node, name: str = "p") -> CompilationUnit:
        return CompilationUnit.from_files(name, [self.file(*decls)], self.info)


@pytest.fixture
def go() -> GoBuilder:
    return GoBuilder()


@pytest.fixture
def make_go():
    """Factory for extra builders, one per file or unit."""
    return GoBuilder
