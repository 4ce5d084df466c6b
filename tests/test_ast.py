import dataclasses
import json

import pytest
from hypothesis import given
from hypothesis import strategies as st

from lox.lox_ast import (
    Assign,
    Binary,
    Block,
    Comma,
    ExpressionStmt,
    Grouping,
    Literal,
    PrintStmt,
    Ternary,
    Unary,
    VarDecl,
    Variable,
)


def test_node_repr_hides_positions() -> None:
    node = Binary("+", Literal(1.0), Variable("x"), line=3, col=7)
    assert repr(node) == "Binary(operator='+', left=Literal(value=1.0), right=Variable(name='x'))"


def test_node_eq_ignores_positions() -> None:
    assert Variable("x", line=1, col=1) == Variable("x", line=9, col=9)


def test_node_eq_not_equal_kind() -> None:
    assert Comma(Variable("a"), Variable("b")) != Binary(
        ",", Variable("a"), Variable("b")
    )


def test_node_eq_not_equal_children() -> None:
    n1 = Unary("-", Variable("x"))
    n2 = Unary("-", Variable("y"))
    assert n1 != n2


@pytest.mark.parametrize(
    "left,right",
    [
        (True, 1.0),
        (False, 0.0),
        (None, False),
        ("1", 1.0),
    ],
)  # type: ignore[misc]
def test_literal_eq_respects_value_type(left: object, right: object) -> None:
    assert Literal(left) != Literal(right)  # type: ignore[arg-type]


def test_literal_hash_consistent_with_eq() -> None:
    assert hash(Literal(2.0, line=1)) == hash(Literal(2.0, line=5))
    assert len({Literal(True), Literal(1.0)}) == 2


def test_nodes_are_immutable() -> None:
    node = Variable("x")
    with pytest.raises(dataclasses.FrozenInstanceError):
        node.name = "y"  # type: ignore[misc]


def test_kinds() -> None:
    nodes = [
        Literal(None),
        Variable("x"),
        Assign("x", Literal(1.0)),
        Ternary(Variable("a"), Variable("b"), Variable("c")),
        Comma(Variable("a"), Variable("b")),
        Binary("*", Variable("a"), Variable("b")),
        Unary("!", Variable("a")),
        Grouping(Variable("a")),
        ExpressionStmt(Variable("a")),
        PrintStmt(Variable("a")),
        VarDecl("a"),
        Block(),
    ]
    assert [n.kind for n in nodes] == [
        "literal",
        "variable",
        "assign",
        "ternary",
        "comma",
        "binary",
        "unary",
        "grouping",
        "expression",
        "print",
        "var",
        "block",
    ]


@pytest.mark.parametrize("target", ["", "1x", "a b", "a.b", "var", "nil"])  # type: ignore[misc]
def test_assign_rejects_non_identifier_target(target: str) -> None:
    with pytest.raises(ValueError, match="Invalid assignment target"):
        Assign(target, Literal(1.0))


def test_assign_rejects_expression_target() -> None:
    with pytest.raises(ValueError):
        Assign(Variable("x"), Literal(1.0))  # type: ignore[arg-type]


def test_block_stores_owned_tuple() -> None:
    body = [VarDecl("x", Literal(1.0))]
    block = Block(body)  # type: ignore[arg-type]
    body.append(VarDecl("y"))
    assert block.statements == (VarDecl("x", Literal(1.0)),)


def test_var_decl_default_initializer() -> None:
    assert VarDecl("x").initializer is None


def test_to_dict_basic() -> None:
    node = VarDecl("x", Literal(1.0, line=1, col=9), line=1, col=1)
    assert node.to_dict() == {
        "kind": "var",
        "line": 1,
        "col": 1,
        "name": "x",
        "initializer": {"kind": "literal", "line": 1, "col": 9, "value": 1.0},
    }


def test_to_dict_block_children_are_lists() -> None:
    block = Block((PrintStmt(Literal("hi")), Block()), line=2, col=3)
    d = block.to_dict()
    assert d["kind"] == "block"
    assert isinstance(d["statements"], list)
    assert d["statements"][0]["expression"]["value"] == "hi"
    assert d["statements"][1]["statements"] == []


def test_to_dict_is_json_serializable() -> None:
    node = ExpressionStmt(
        Ternary(
            Binary("==", Variable("a"), Literal(None)),
            Assign("b", Unary("-", Literal(2.5))),
            Grouping(Comma(Literal(True), Literal("s"))),
        )
    )
    restored = json.loads(json.dumps(node.to_dict()))
    assert restored["expression"]["condition"]["right"]["value"] is None
    assert restored["expression"]["then_branch"]["name"] == "b"


@given(
    st.from_regex(r"[A-Za-z_][A-Za-z0-9_]{0,10}", fullmatch=True).filter(
        lambda s: s not in {"var", "print", "true", "false", "nil"}
    ),
    st.integers(min_value=1, max_value=10_000),
    st.integers(min_value=1, max_value=200),
)  # type: ignore[misc]
def test_positions_round_trip_through_to_dict(name: str, line: int, col: int) -> None:
    node = Assign(name, Variable(name, line=line, col=col), line=line, col=col)
    d = node.to_dict()
    assert (d["line"], d["col"]) == (line, col)
    assert d["name"] == name
    assert d["value"] == {"kind": "variable", "line": line, "col": col, "name": name}


@given(st.floats(allow_nan=False), st.floats(allow_nan=False))  # type: ignore[misc]
def test_literal_eq_matches_float_eq(a: float, b: float) -> None:
    assert (Literal(a) == Literal(b)) == (a == b)
