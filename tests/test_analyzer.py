"""Tests for semantic analysis and IR lowering."""

import pytest

from rome77.analyzer import analyze
from rome77.errors import SemanticError
from rome77.ir import (
    BinaryOp,
    Call,
    Conditional,
    Declaration,
    Function,
    Input,
    Literal,
    Operator,
    Output,
    Program,
    UnaryOp,
    Variable,
)
from rome77.parser import parse

ADD, SUB, MUL, DIV = Operator.ADD, Operator.SUB, Operator.MUL, Operator.DIV


def lower(source):
    return analyze(parse(source))


def output(source):
    """The expression of the single Grafo statement in source."""
    program = lower(source)
    assert len(program.statements) == 1
    return program.statements[-1].expression


def test_empty_program():
    assert lower("") == Program((), ())


def test_simple_output():
    assert lower("Grafo V") == Program((), (Output(Literal(5)),))


def test_declaration_and_output():
    assert lower("As x = X\nGrafo x") == Program(
        (),
        (Declaration("x", Literal(10)), Output(Variable("x"))),
    )


def test_function_definition_and_call():
    assert lower("Munus double n = n + n\nGrafo double V") == Program(
        (Function("double", ("n",), BinaryOp(ADD, Variable("n"), Variable("n"))),),
        (Output(Call("double", (Literal(5),))),),
    )


def test_only_function_definitions():
    assert lower("Munus f n = n") == Program((Function("f", ("n",), Variable("n")),), ())


def test_input():
    assert lower("As k = Anagnosi\nGrafo k").statements[0] == Declaration("k", Input())
    assert output("Grafo Anagnosi + I") == BinaryOp(ADD, Input(), Literal(1))


@pytest.mark.parametrize("source,expected", [
    ("Grafo I + II * III", BinaryOp(ADD, Literal(1), BinaryOp(MUL, Literal(2), Literal(3)))),
    ("Grafo X - IV / II", BinaryOp(SUB, Literal(10), BinaryOp(DIV, Literal(4), Literal(2)))),
    ("Grafo V - II - I", BinaryOp(SUB, BinaryOp(SUB, Literal(5), Literal(2)), Literal(1))),
    ("Grafo VIII / IV / II", BinaryOp(DIV, BinaryOp(DIV, Literal(8), Literal(4)), Literal(2))),
    ("Grafo VII * VI", BinaryOp(MUL, Literal(7), Literal(6))),
    ("Grafo N * X", BinaryOp(MUL, Literal(0), Literal(10))),
    ("Grafo -V", UnaryOp(SUB, Literal(5))),
    ("Grafo +V", UnaryOp(ADD, Literal(5))),
    ("Grafo --V", UnaryOp(SUB, UnaryOp(SUB, Literal(5)))),
    ("Grafo -V * II", BinaryOp(MUL, UnaryOp(SUB, Literal(5)), Literal(2))),
    (
        "Grafo I + II - III * IV / V",
        BinaryOp(
            SUB,
            BinaryOp(ADD, Literal(1), Literal(2)),
            BinaryOp(DIV, BinaryOp(MUL, Literal(3), Literal(4)), Literal(5)),
        ),
    ),
    (
        "Grafo ((((I + II) * III) - IV) / V)",
        BinaryOp(
            DIV,
            BinaryOp(SUB, BinaryOp(MUL, BinaryOp(ADD, Literal(1), Literal(2)), Literal(3)), Literal(4)),
            Literal(5),
        ),
    ),
])
def test_arithmetic(source, expected):
    assert output(source) == expected


@pytest.mark.parametrize("source,expected", [
    ("Grafo Sinon I XLII N", Conditional(Literal(1), Literal(42), Literal(0))),
    (
        "Grafo Sinon I (Sinon II III IV) V",
        Conditional(Literal(1), Conditional(Literal(2), Literal(3), Literal(4)), Literal(5)),
    ),
    (
        "Grafo Sinon (I + II - III) X N",
        Conditional(BinaryOp(SUB, BinaryOp(ADD, Literal(1), Literal(2)), Literal(3)), Literal(10), Literal(0)),
    ),
    ("Grafo Sinon Anagnosi I II", Conditional(Input(), Literal(1), Literal(2))),
])
def test_conditionals(source, expected):
    assert output(source) == expected


def test_call_binds_tighter_than_binary_operators():
    program = lower("Munus f n = n + I\nMunus g n = f n + I\nGrafo g I")
    assert program.function("g").body == BinaryOp(ADD, Call("f", (Variable("n"),)), Literal(1))


def test_multi_argument_calls():
    program = lower("Munus add3 a b c = a + b + c\nGrafo add3 I II III")
    assert program.function("add3").parameters == ("a", "b", "c")
    assert program.statements == (Output(Call("add3", (Literal(1), Literal(2), Literal(3)))),)


def test_parenthesized_calls_as_operands():
    program = lower("Munus f n = n\nMunus g n = n + I\nGrafo (f I) + (g II)")
    assert program.statements[0] == Output(
        BinaryOp(ADD, Call("f", (Literal(1),)), Call("g", (Literal(2),)))
    )


def test_recursive_fibonacci():
    program = lower("Munus fib n = Sinon (n - I) (fib (n - I) + fib (n - II)) I\nGrafo fib X")
    n_minus = lambda k: BinaryOp(SUB, Variable("n"), Literal(k))  # noqa: E731
    assert program == Program(
        (
            Function(
                "fib",
                ("n",),
                Conditional(
                    n_minus(1),
                    BinaryOp(ADD, Call("fib", (n_minus(1),)), Call("fib", (n_minus(2),))),
                    Literal(1),
                ),
            ),
        ),
        (Output(Call("fib", (Literal(10),))),),
    )


def test_mutually_recursive_functions():
    program = lower(
        "Munus even n = Sinon n (odd (n - I)) I\n"
        "Munus odd n = Sinon n (even (n - I)) N\n"
        "Grafo even V"
    )
    assert [f.name for f in program.functions] == ["even", "odd"]
    assert program.function("even").body == Conditional(
        Variable("n"), Call("odd", (BinaryOp(SUB, Variable("n"), Literal(1)),)), Literal(1)
    )
    assert program.function("odd").body.else_branch == Literal(0)


def test_function_returning_conditional():
    program = lower("Munus abs n = Sinon n n (-n)\nGrafo abs V")
    assert program.function("abs").body == Conditional(
        Variable("n"), Variable("n"), UnaryOp(SUB, Variable("n"))
    )


def test_complex_program():
    program = lower("Munus inc n = n + I\nAs x = Anagnosi\nAs y = inc x\nGrafo Sinon y (y * II) N")
    assert program.statements == (
        Declaration("x", Input()),
        Declaration("y", Call("inc", (Variable("x"),))),
        Output(Conditional(Variable("y"), BinaryOp(MUL, Variable("y"), Literal(2)), Literal(0))),
    )


def test_parameter_shadows_outer_variable():
    program = lower("As n = I\nMunus f n = n + I\nGrafo f II")
    assert program == Program(
        (Function("f", ("n",), BinaryOp(ADD, Variable("n"), Literal(1))),),
        (Declaration("n", Literal(1)), Output(Call("f", (Literal(2),)))),
    )


def test_parameter_shadows_function_name():
    program = lower("Munus g = I\nMunus f g = g\nGrafo f g")
    assert program.function("f").body == Variable("g")
    assert program.statements == (Output(Call("f", (Call("g", ()),))),)


def test_zero_parameter_function_is_called_by_name():
    assert output("Munus k = V\nGrafo k") == Call("k", ())


def test_unused_names_are_allowed():
    program = lower("Munus unused n = n\nAs x = I\nAs y = II\nGrafo x")
    assert len(program.functions) == 1
    assert len(program.statements) == 3


def test_function_order_is_source_order():
    program = lower("Munus b = I\nGrafo V\nMunus a = II")
    assert [f.name for f in program.functions] == ["b", "a"]
    assert program.statements == (Output(Literal(5)),)


@pytest.mark.parametrize("source,message", [
    ("Grafo x", "Undefined variable: x"),
    ("Grafo f I", "Undefined function: f"),
    ("As x = x + I", "Undefined variable: x"),
    ("As x = y + I", "Undefined variable: y"),
    ("Grafo x\nAs x = I", "Undefined variable: x"),
    ("As a = b\nAs b = I", "Undefined variable: b"),
    ("Grafo Sinon x I II", "Undefined variable: x"),
    ("Grafo Sinon I x II", "Undefined variable: x"),
    ("Grafo Sinon I II x", "Undefined variable: x"),
    ("Grafo x + I", "Undefined variable: x"),
    ("Grafo -x", "Undefined variable: x"),
    ("Munus f n = x + n\nGrafo f I", "Undefined variable: x"),
    ("As x = I\nMunus f n = x", "Undefined variable: x"),
    ("Munus f n = g n\nGrafo f I", "Undefined function: g"),
    ("Munus f n = f n m", "Undefined variable: m"),
    ("As x = I\nAs x = II", "Variable x is already defined"),
    ("Munus f n = n\nMunus f n = n + I", "Function f is already defined"),
    ("As f = I\nMunus f n = n", "Function f is already defined"),
    ("Munus f n = n\nAs f = I", "Function f is already defined"),
    ("Munus f a a = a", "Duplicate parameter name: a"),
    ("Munus f a b a = a + b", "Duplicate parameter name: a"),
    ("Munus sum a b = a + b\nGrafo sum I", "Function sum expects 2 arguments, got 1"),
    ("Munus sum a b = a + b\nGrafo sum I II III", "Function sum expects 2 arguments, got 3"),
    ("Munus f n = n\nGrafo f", "Function f expects 1 arguments, got 0"),
    ("Munus add4 a b c d = a + b + c + d\nGrafo add4 I", "Function add4 expects 4 arguments, got 1"),
])
def test_semantic_errors(source, message):
    tree = parse(source)
    with pytest.raises(SemanticError) as exc_info:
        analyze(tree)
    assert exc_info.value.message == message


@pytest.mark.parametrize("source,line,column", [
    ("Grafo x", 1, 6),
    ("Grafo f I", 1, 6),
    ("As x = I\nAs x = II", 2, 3),
    ("Munus f n = n\nMunus f n = n + I", 2, 6),
    ("Munus f a a = a", 1, 10),
    ("Munus sum a b = a + b\nGrafo I + sum I", 2, 10),
])
def test_semantic_error_locations(source, line, column):
    with pytest.raises(SemanticError) as exc_info:
        lower(source)
    assert (exc_info.value.line, exc_info.value.column) == (line, column)


def test_function_bodies_are_checked_before_main_body():
    with pytest.raises(SemanticError) as exc_info:
        lower("Grafo z\nMunus f n = y")
    assert exc_info.value.message == "Undefined variable: y"


def test_errors_follow_left_to_right_order():
    with pytest.raises(SemanticError) as exc_info:
        lower("Grafo a + b")
    assert exc_info.value.message == "Undefined variable: a"


def test_reanalysis_is_idempotent():
    tree = parse("Munus f a b = (a + b) * (a - b)\nAs x = Anagnosi\nGrafo f x V")
    first = analyze(tree)
    assert analyze(tree) == first
    assert analyze(tree.root) == first
    assert analyze(parse("Munus f a b = (a + b) * (a - b)\nAs x = Anagnosi\nGrafo f x V")) == first


def test_program_serializes_to_dict():
    program = lower("Munus f n = -n\nAs x = Anagnosi\nGrafo Sinon x (f x) N")
    assert program.to_dict() == {
        "functions": [
            {"name": "f", "params": ["n"], "body": {"type": "unary", "op": "SUB", "operand": {"type": "variable", "name": "n"}}},
        ],
        "statements": [
            {"type": "declaration", "name": "x", "value": {"type": "input"}},
            {
                "type": "output",
                "value": {
                    "type": "conditional",
                    "condition": {"type": "variable", "name": "x"},
                    "then": {"type": "call", "name": "f", "args": [{"type": "variable", "name": "x"}]},
                    "else": {"type": "literal", "value": 0},
                },
            },
        ],
    }
