"""Traversal of wwulang syntax trees.

Visitor is a fold over the closed set of node types in wwulang/pure/syntax.py. Subclasses must implement one method per
node type (ABC enforces this at instantiation), and dispatch never guesses: a node outside the set is a TypeError.

Printer is the canonical Visitor. It flattens the left fold into postfix order: "(2+3)*4" prints "2 3 + 4 *" and
"x=1+2" prints "1 2 + =x". The output is for display and comparison only; it is not meant to be re-parsed.
"""

from abc import ABC, abstractmethod

from wwulang.pure.syntax import Assignment, Expression, Number, Operation, Program, SubExpression, VariableRef


class Visitor(ABC):
    """Generic fold over a syntax tree. Extra positional args to visit are passed through to the handler (lowering uses
    this to thread the left-hand value into operation).
    """
    METHODS = {
        Number: "number",
        VariableRef: "variable",
        SubExpression: "subexpression",
        Operation: "operation",
        Expression: "expression",
        Assignment: "assignment",
        Program: "program",
    }

    def visit(self, node, *args):
        try:
            method = Visitor.METHODS[type(node)]
        except KeyError:
            raise TypeError(f"'{type(node).__name__}' is not a wwulang syntax tree node") from None
        return getattr(self, method)(node, *args)

    @abstractmethod
    def number(self, node):
        ...

    @abstractmethod
    def variable(self, node):
        ...

    @abstractmethod
    def subexpression(self, node):
        ...

    @abstractmethod
    def operation(self, node, *args):
        ...

    @abstractmethod
    def expression(self, node):
        ...

    @abstractmethod
    def assignment(self, node):
        ...

    @abstractmethod
    def program(self, node):
        ...


def format_number(value):
    """Shortest text for value that round-trips; integral values drop the fraction (2.0 -> '2')."""
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


class Printer(Visitor):
    """Folds a tree into a single line of space-separated postfix tokens."""
    SEPARATOR = "; "

    def number(self, node):
        return format_number(node.value)

    def variable(self, node):
        return node.name

    def subexpression(self, node):
        return self.visit(node.expression)

    def operation(self, node, *args):
        return f"{self.visit(node.operand)} {node.operator}"

    def expression(self, node):
        return " ".join([self.visit(node.first)] + [self.visit(operation) for operation in node.rest])

    def assignment(self, node):
        return f"{self.visit(node.value)} ={node.variable}"

    def program(self, node):
        return Printer.SEPARATOR.join(self.visit(line) for line in node.lines)


def print_tree(node):
    """Returns the canonical text of node (any syntax tree node, usually a Program). Pure: no IO."""
    return Printer().visit(node)
