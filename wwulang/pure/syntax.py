"""Abstract syntax tree for wwulang, a tiny expression/assignment language.

The tree mirrors the grammar in `wwulang/pure/parser.py` one-to-one:

```
<program>      ::= <program_line> (";" <program_line>)* ";"?
<program_line> ::= <assignment> | <expression>
<assignment>   ::= <variable> "=" <expression>
<expression>   ::= <term> (("+" | "-") <term>)*   ; left-associative
<term>         ::= <factor> (("*" | "/") <factor>)*  ; left-associative
<factor>       ::= "(" <expression> ")" | <number> | <variable>
```

Both binary tiers collapse into the same shape: a first operand followed by a flat list of (operator, operand)
pairs. A `term` that is itself a chain of `*`/`/` becomes a SubExpression operand of the enclosing `+`/`-` chain, so
precedence lives entirely in the nesting.

Nodes are frozen: the parser builds the whole tree in one pass and nothing downstream mutates it.
"""

from dataclasses import dataclass
from typing import Tuple, Union


@dataclass(frozen=True)
class Number:
    """Numeric literal. There is only one numeric domain (double precision floats)."""
    value: float


@dataclass(frozen=True)
class VariableRef:
    """Use of a variable as an operand."""
    name: str


@dataclass(frozen=True)
class SubExpression:
    """Owning box around a nested Expression. This is the only place the tree refers back to itself."""
    expression: "Expression"


Operand = Union[Number, VariableRef, SubExpression]


@dataclass(frozen=True)
class Operation:
    """One trailing (operator, right-hand operand) pair of a left-associative chain."""
    operator: str
    operand: Operand


@dataclass(frozen=True)
class Expression:
    """first (op operand)*, evaluated as a left fold seeded by first. rest may be empty."""
    first: Operand
    rest: Tuple[Operation, ...] = ()

    @property
    def is_bare(self):
        """Whether or not this expression is a single operand with no trailing operations."""
        return not self.rest


@dataclass(frozen=True)
class Assignment:
    """variable = value. The value is lowered before the slot is looked up, so "x = x + 1" reads the old x."""
    variable: str
    value: Expression


ProgramLine = Union[Assignment, Expression]


@dataclass(frozen=True)
class Program:
    """Statements of one compilation unit, in source order. Never empty once parsed."""
    lines: Tuple[ProgramLine, ...]
