"""IR (Intermediate Representation) definitions. The analyzer lowers syntax trees to these immutable nodes."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class Operator(Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"


# --- Expressions ---

@dataclass(frozen=True)
class Literal:
    value: int

    def to_dict(self) -> dict[str, Any]:
        return {"type": "literal", "value": self.value}


@dataclass(frozen=True)
class Variable:
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "variable", "name": self.name}


@dataclass(frozen=True)
class Input:
    """Reads one integer each time it is evaluated."""

    def to_dict(self) -> dict[str, Any]:
        return {"type": "input"}


@dataclass(frozen=True)
class UnaryOp:
    operator: Operator  # ADD or SUB
    operand: "Expression"

    def to_dict(self) -> dict[str, Any]:
        return {"type": "unary", "op": self.operator.name, "operand": self.operand.to_dict()}


@dataclass(frozen=True)
class BinaryOp:
    operator: Operator
    left: "Expression"
    right: "Expression"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "binary",
            "op": self.operator.name,
            "left": self.left.to_dict(),
            "right": self.right.to_dict(),
        }


@dataclass(frozen=True)
class Conditional:
    """Zero test: a zero condition selects else_branch, anything else then_branch."""
    condition: "Expression"
    then_branch: "Expression"
    else_branch: "Expression"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "conditional",
            "condition": self.condition.to_dict(),
            "then": self.then_branch.to_dict(),
            "else": self.else_branch.to_dict(),
        }


@dataclass(frozen=True)
class Call:
    name: str
    arguments: tuple["Expression", ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "arguments", tuple(self.arguments))

    def to_dict(self) -> dict[str, Any]:
        return {"type": "call", "name": self.name, "args": [a.to_dict() for a in self.arguments]}


Expression = Union[Literal, Variable, Input, UnaryOp, BinaryOp, Conditional, Call]


# --- Statements ---

@dataclass(frozen=True)
class Declaration:
    name: str
    expression: Expression

    def to_dict(self) -> dict[str, Any]:
        return {"type": "declaration", "name": self.name, "value": self.expression.to_dict()}


@dataclass(frozen=True)
class Output:
    expression: Expression

    def to_dict(self) -> dict[str, Any]:
        return {"type": "output", "value": self.expression.to_dict()}


Statement = Union[Declaration, Output]


@dataclass(frozen=True)
class Function:
    name: str
    parameters: tuple[str, ...]
    body: Expression

    def __post_init__(self) -> None:
        object.__setattr__(self, "parameters", tuple(self.parameters))

    @property
    def arity(self) -> int:
        return len(self.parameters)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "params": list(self.parameters), "body": self.body.to_dict()}


@dataclass(frozen=True)
class Program:
    functions: tuple[Function, ...] = ()
    statements: tuple[Statement, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "functions", tuple(self.functions))
        object.__setattr__(self, "statements", tuple(self.statements))

    def function(self, name: str) -> Function:
        for fn in self.functions:
            if fn.name == name:
                return fn
        raise KeyError(name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "functions": [f.to_dict() for f in self.functions],
            "statements": [s.to_dict() for s in self.statements],
        }
