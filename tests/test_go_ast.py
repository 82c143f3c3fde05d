# tests/test_go_ast.py
"""
Tests for the node model, traversal helpers and type-identity tables.
"""

import pytest

from namedreturns.ast_helper import Inspector, find_first, inspect, iter_preorder
from namedreturns.go_ast import (
    NO_POS,
    NODE_TYPES,
    ArrayType,
    AssignStmt,
    BasicLit,
    BlockStmt,
    CallExpr,
    CaseClause,
    ChanType,
    CommClause,
    CompositeLit,
    Ellipsis,
    Field,
    FieldList,
    File,
    FuncDecl,
    FuncLit,
    FuncType,
    Ident,
    IfStmt,
    IndexListExpr,
    InterfaceType,
    MapType,
    Position,
    ReturnStmt,
    SelectStmt,
    SelectorExpr,
    SendStmt,
    SliceExpr,
    StarExpr,
    StructType,
    TypeAssertExpr,
    TypeSwitchStmt,
    expr_string,
    go_quote,
)
from namedreturns.type_info import (
    ERROR_TYPE,
    UNIVERSE,
    TypeInfo,
    basic,
    identical,
    map_of,
    named,
    pointer,
    slice_of,
)


class TestPosition:

    def test_str(self):
        assert str(Position("a.go", 3, 7)) == "a.go:3:7"
        assert str(Position("a.go", 3)) == "a.go:3"
        assert str(NO_POS) == "-"

    def test_validity(self):
        assert Position("a.go", 1, 1).is_valid()
        assert not Position("a.go").is_valid()

    def test_ordering(self):
        ps = [Position("b.go", 1, 1), Position("a.go", 9, 1), Position("a.go", 2, 5)]
        assert sorted(ps) == [Position("a.go", 2, 5), Position("a.go", 9, 1),
                              Position("b.go", 1, 1)]


class TestNodes:

    def test_registry(self):
        assert NODE_TYPES["FuncDecl"] is FuncDecl
        assert NODE_TYPES["ReturnStmt"] is ReturnStmt
        assert "Node" not in NODE_TYPES
        for kind in ("TypeSwitchStmt", "SelectStmt", "CommClause", "SendStmt",
                     "SliceExpr", "TypeAssertExpr", "IndexListExpr", "TypeSpec"):
            assert kind in NODE_TYPES

    def test_identity_semantics(self):
        a, b = Ident("x"), Ident("x")
        assert a != b
        assert len({a, b}) == 2

    def test_children_follow_field_order(self):
        lhs, rhs = Ident("x"), BasicLit("INT", "1")
        stmt = AssignStmt([lhs], ":=", [rhs])
        assert list(stmt.children()) == [lhs, rhs]
        assert stmt.is_define

    def test_children_skip_missing_fields(self):
        cond = Ident("ok")
        body = BlockStmt([])
        stmt = IfStmt(None, cond, body, None)
        assert list(stmt.children()) == [cond, body]

    def test_bare_return(self):
        assert ReturnStmt().is_bare
        assert not ReturnStmt([Ident("x")]).is_bare

    def test_type_switch_walks_init_assign_body(self):
        init = AssignStmt([Ident("v")], ":=", [Ident("x")])
        assign = AssignStmt([Ident("err")], ":=", [TypeAssertExpr(Ident("v"))])
        body = BlockStmt([CaseClause([Ident("error")], [ReturnStmt()])])
        stmt = TypeSwitchStmt(init, assign, body)
        assert list(stmt.children()) == [init, assign, body]

    def test_select_and_comm_clause(self):
        send = SendStmt(Ident("ch"), BasicLit("INT", "1"))
        ret = ReturnStmt()
        clause = CommClause(send, [ret])
        stmt = SelectStmt(BlockStmt([clause]))
        assert list(clause.children()) == [send, ret]
        assert [type(n).__name__ for n in iter_preorder(stmt)] == [
            "SelectStmt", "BlockStmt", "CommClause", "SendStmt", "Ident",
            "BasicLit", "ReturnStmt",
        ]

    def test_default_comm_clause_has_no_comm(self):
        ret = ReturnStmt()
        assert list(CommClause(None, [ret]).children()) == [ret]

    def test_slice_children_skip_flag(self):
        x, lo, hi = Ident("s"), Ident("i"), Ident("j")
        assert list(SliceExpr(x, lo, hi, None, False).children()) == [x, lo, hi]

    def test_type_params_come_first(self):
        tparams = FieldList([Field([Ident("T")], Ident("any"))])
        params = FieldList([Field([Ident("v")], Ident("T"))])
        ft = FuncType(tparams, params, None)
        assert list(ft.children()) == [tparams, params]


class TestExprString:

    @pytest.mark.parametrize("expr, text", [
        (Ident("int"), "int"),
        (StarExpr(SelectorExpr(Ident("pkg"), Ident("T"))), "*pkg.T"),
        (ArrayType(None, Ident("string")), "[]string"),
        (ArrayType(BasicLit("INT", "4"), Ident("byte")), "[4]byte"),
        (MapType(Ident("string"), ArrayType(None, Ident("int"))), "map[string][]int"),
        (ChanType("recv", Ident("int")), "<-chan int"),
        (ChanType("send", Ident("int")), "chan<- int"),
        (ChanType("", Ident("int")), "chan int"),
        (Ellipsis(Ident("any")), "...any"),
        (InterfaceType(), "interface{}"),
        (StructType(), "struct{}"),
        (IndexListExpr(Ident("Pair"), [Ident("K"), Ident("V")]), "Pair[K, V]"),
        (SliceExpr(Ident("s"), None, Ident("n")), "s[:n]"),
        (SliceExpr(Ident("s"), Ident("i"), Ident("j"), Ident("k"), True), "s[i:j:k]"),
        (TypeAssertExpr(Ident("x"), Ident("error")), "x.(error)"),
        (TypeAssertExpr(Ident("x")), "x.(type)"),
        (None, ""),
    ])
    def test_types(self, expr, text):
        assert expr_string(expr) == text

    def test_struct_members(self):
        st = StructType(FieldList([
            Field([Ident("a"), Ident("b")], Ident("int")),
            Field([Ident("name")], Ident("string"), BasicLit("STRING", '`json:"name"`')),
            Field([], StarExpr(Ident("Base"))),
        ]))
        assert expr_string(st) == "struct{a, b int; name string; *Base}"

    def test_interface_members(self):
        it = InterfaceType(FieldList([
            Field([Ident("Error")], FuncType(params=FieldList([]),
                                             results=FieldList([Field([], Ident("string"))]))),
            Field([], Ident("fmt.Stringer")),
        ]))
        assert expr_string(it) == "interface{Error() string; fmt.Stringer}"

    def test_func_type(self):
        ft = FuncType(
            params=FieldList([Field([], Ident("int"))]),
            results=FieldList([Field([], Ident("error"))]),
        )
        assert expr_string(ft) == "func(int) error"
        ft.results.list.append(Field([], Ident("bool")))
        assert expr_string(ft) == "func(int) (error, bool)"

    def test_named_results_are_parenthesised(self):
        ft = FuncType(params=FieldList([]),
                      results=FieldList([Field([Ident("err")], Ident("error"))]))
        assert expr_string(ft) == "func() (err error)"

    def test_literals(self):
        assert expr_string(FuncLit(FuncType(params=FieldList([])))) == "(func() literal)"
        assert expr_string(CompositeLit(Ident("T"), [Ident("a")])) == "T{…}"
        assert expr_string(CompositeLit(Ident("T"))) == "T{}"

    def test_go_quote(self):
        assert go_quote("int") == '"int"'
        assert go_quote('a"b') == '"a\\"b"'


class TestTraversal:

    def _tree(self):
        inner = ReturnStmt([Ident("x")])
        lit = FuncLit(FuncType(), BlockStmt([inner]))
        call = CallExpr(Ident("f"), [lit])
        outer = ReturnStmt([Ident("y")])
        return BlockStmt([call, outer]), lit, inner, outer

    def test_iter_preorder(self):
        body, lit, inner, outer = self._tree()
        order = [type(n).__name__ for n in iter_preorder(body)]
        assert order == [
            "BlockStmt", "CallExpr", "Ident", "FuncLit", "FuncType",
            "BlockStmt", "ReturnStmt", "Ident", "ReturnStmt", "Ident",
        ]
        assert list(iter_preorder(None)) == []

    def test_inspect_prunes(self):
        body, lit, inner, outer = self._tree()
        seen = []

        def visit(node):
            seen.append(node)
            return not isinstance(node, FuncLit)

        inspect(body, visit)
        assert lit in seen
        assert inner not in seen
        assert outer in seen

    def test_find_first(self):
        body, lit, inner, outer = self._tree()
        is_return = lambda n: isinstance(n, ReturnStmt)
        assert find_first(body, is_return) is inner
        assert find_first(None, is_return) is None

    def test_deep_nesting_does_not_recurse(self):
        node = BlockStmt([])
        root = node
        for _ in range(5000):
            child = BlockStmt([])
            node.list.append(child)
            node = child
        assert sum(1 for _ in iter_preorder(root)) == 5001


class TestInspector:

    def test_filters_across_files(self):
        f1 = File(Ident("p"), [FuncDecl(None, Ident("a"), FuncType(), BlockStmt([]))], "a.go")
        lit = FuncLit(FuncType(), BlockStmt([]))
        body = BlockStmt([AssignStmt([Ident("g")], ":=", [lit])])
        f2 = File(Ident("p"), [FuncDecl(None, Ident("b"), FuncType(), body)], "b.go")
        ins = Inspector([f1, f2])

        seen = []
        ins.preorder([FuncDecl, FuncLit], seen.append)
        assert [type(n).__name__ for n in seen] == ["FuncDecl", "FuncDecl", "FuncLit"]
        assert seen[2] is lit

        everything = []
        ins.preorder([], everything.append)
        assert len(ins) == len(everything)
        assert everything[0] is f1

class TestTypeIdentity:

    def test_universe_error_is_unique(self):
        assert UNIVERSE["error"] is ERROR_TYPE
        assert identical(ERROR_TYPE, ERROR_TYPE)

    def test_named_types_match_only_themselves(self):
        assert not identical(named("error", "p"), ERROR_TYPE)
        assert not identical(named("T", "p"), named("T", "p"))

    def test_structural_kinds(self):
        assert identical(basic("int"), basic("int"))
        assert identical(slice_of(basic("int")), slice_of(basic("int")))
        assert not identical(pointer(basic("int")), slice_of(basic("int")))
        assert identical(map_of(basic("string"), ERROR_TYPE),
                         map_of(basic("string"), ERROR_TYPE))
        assert not identical(None, ERROR_TYPE)

    def test_type_str(self):
        assert str(map_of(basic("string"), pointer(named("T", "pkg")))) == "map[string]*pkg.T"


class TestTypeInfo:

    def test_define_and_use(self):
        info = TypeInfo()
        decl, ref, other = Ident("err"), Ident("err"), Ident("err")
        obj = info.define(decl, ERROR_TYPE)
        info.use(ref, obj)
        assert info.object_of(decl) is obj
        assert info.object_of(ref) is obj
        assert info.object_of(other) is None

    def test_type_of_prefers_recorded_type(self):
        info = TypeInfo()
        expr = Ident("error")
        info.record_type(expr, ERROR_TYPE)
        assert info.type_of(expr) is ERROR_TYPE
        assert info.type_of(None) is None

    def test_type_of_falls_back_to_object(self):
        info = TypeInfo()
        ident = Ident("n")
        info.define(ident, UNIVERSE["int"])
        assert info.type_of(ident) is UNIVERSE["int"]
