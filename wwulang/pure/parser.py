"""Recursive descent parser for wwulang. See wwulang/pure/syntax.py for the tree it produces.

Grammar (whitespace is insignificant between tokens):

```
<program>      ::= <program_line> (";" <program_line>)* ";"?
<program_line> ::= <assignment> | <expression>     ; assignment is tried first
<assignment>   ::= <variable> "=" <expression>
<expression>   ::= <term> (("+" | "-") <term>)*
<term>         ::= <factor> (("*" | "/") <factor>)*
<factor>       ::= "(" <expression> ")" | <number> | <variable>
<variable>     ::= [A-Za-z0-9]+                      ; no whitespace inside a name
<number>       ::= [+-]? (digits ["." digits] | "." digits) [exponent]
```

Every rule either consumes input and returns a node, or returns None and leaves the cursor where it found it (give or
take whitespace). A repetition that cannot complete an iteration rewinds to before the separator/operator it consumed,
so on "1+" the parse stops right before the "+". Alternatives are ordered: number is tried before variable, so "2x" is
the number 2 followed by unparsed input.

The only backtracking point is program_line: if no "<variable> =" prefix can be matched, the cursor goes back to the
start of the line and an expression is tried instead.
"""

import logging
import re

from wwulang.lang.error import ParseFailure
from wwulang.pure.syntax import Assignment, Expression, Number, Operation, Program, SubExpression, VariableRef


logger = logging.getLogger(__name__)


class Parser:
    """Single-use parser over one line of text. The cursor (self.pos) only moves forward except on rewinds."""
    NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
    VARIABLE = re.compile(r"[A-Za-z0-9]+")
    WHITESPACE = re.compile(r"\s*")

    ADDITIVE = ("+", "-")
    MULTIPLICATIVE = ("*", "/")

    def __init__(self, text):
        self.text = text
        self.pos = 0

    def skip(self):
        """Moves the cursor past any whitespace. Returns the new position."""
        self.pos = Parser.WHITESPACE.match(self.text, self.pos).end()
        return self.pos

    def literal(self, chars):
        """Consumes the first of chars found at the cursor (after whitespace) and returns it, else None."""
        start = self.skip()
        for char in chars:
            if self.text.startswith(char, start):
                self.pos = start + len(char)
                return char
        return None

    def token(self, pattern):
        """Consumes pattern at the cursor (after whitespace) and returns the matched text, else None."""
        match = pattern.match(self.text, self.skip())
        if match is None:
            return None
        self.pos = match.end()
        return match.group()

    @staticmethod
    def _operand(expression):
        """Collapses an Expression into an Operand: bare expressions are unwrapped, chains are boxed."""
        if expression.is_bare:
            return expression.first
        return SubExpression(expression)

    def program(self):
        line = self.program_line()
        if line is None:
            return None

        lines = [line]
        while True:
            mark = self.pos
            if self.literal(";") is None:
                break

            line = self.program_line()
            if line is None:
                self.pos = mark
                break
            lines.append(line)

        self.literal(";")  # optional trailing terminator
        return Program(tuple(lines))

    def program_line(self):
        mark = self.pos
        assignment = self.assignment()
        if assignment is not None:
            return assignment

        self.pos = mark
        return self.expression()

    def assignment(self):
        mark = self.pos

        name = self.variable()
        if name is None or self.literal("=") is None:
            self.pos = mark
            return None

        value = self.expression()
        if value is None:
            self.pos = mark
            return None
        return Assignment(name, value)

    def _chain(self, operand_rule, operators):
        """Parses operand_rule ((operators) operand_rule)* into an Expression. Returns None if there is no first
        operand.
        """
        first = operand_rule()
        if first is None:
            return None

        rest = []
        while True:
            mark = self.pos
            operator = self.literal(operators)
            if operator is None:
                break

            operand = operand_rule()
            if operand is None:
                self.pos = mark
                break
            rest.append(Operation(operator, operand))

        return Expression(first, tuple(rest))

    def expression(self):
        first_term = self.term()
        if first_term is None:
            return None

        rest = []
        while True:
            mark = self.pos
            operator = self.literal(Parser.ADDITIVE)
            if operator is None:
                break

            term = self.term()
            if term is None:
                self.pos = mark
                break
            rest.append(Operation(operator, Parser._operand(term)))

        if not rest:
            return first_term
        return Expression(Parser._operand(first_term), tuple(rest))

    def term(self):
        return self._chain(self.factor, Parser.MULTIPLICATIVE)

    def factor(self):
        mark = self.pos

        if self.literal("(") is not None:
            expression = self.expression()
            if expression is not None and self.literal(")") is not None:
                return SubExpression(expression)
            self.pos = mark
            return None

        number = self.number()
        if number is not None:
            return number

        name = self.variable()
        if name is not None:
            return VariableRef(name)

        self.pos = mark
        return None

    def number(self):
        token = self.token(Parser.NUMBER)
        if token is None:
            return None
        return Number(float(token))

    def variable(self):
        return self.token(Parser.VARIABLE)


def parse(text):
    """Parses text as a wwulang program. Returns (Program, end) where end is the position parsing finished at (always
    len(text) on success), or a ParseFailure if the grammar did not match the entire input.
    """
    parser = Parser(text)
    tree = parser.program()

    if tree is None:
        logger.debug("no program_line matched in %r", text)
        return ParseFailure(text, 0)

    stop = parser.skip()
    if stop != len(text):
        logger.debug("parse of %r stopped at %d", text, stop)
        return ParseFailure(text, stop)

    return tree, parser.pos
