"""Lowering of wwulang syntax trees into LLVM IR (built with llvmlite).

One compilation unit becomes one module holding one function `double ()` with a single `entry` block. Variables live
in stack slots (alloca) that are created on first assignment, written with store and read with load. The function
returns the value of the last program line.

Nothing here raises for a bad program: every lowering step returns a Lowered result, either a Value wrapping an
ir.Value or a Failed wrapping the WwuError that stopped it. Failures short-circuit the left fold of an expression but
never stop later program lines from being lowered.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Tuple, Union

from llvmlite import ir

from wwulang.lang.error import InvalidOperatorError, LoweringFailure, UnknownVariableError, WwuError
from wwulang.pure.printer import Visitor
from wwulang.pure.syntax import Program


logger = logging.getLogger(__name__)

DOUBLE = ir.DoubleType()


@dataclass(frozen=True)
class Value:
    value: ir.Value
    ok = True


@dataclass(frozen=True)
class Failed:
    error: WwuError
    ok = False


Lowered = Union[Value, Failed]


class CompilationContext:
    """All mutable state of one compilation unit. Created per unit and dropped with it, so nothing can leak from one
    line to the next.
    """
    FUNCTION = "wwu_unit"

    def __init__(self, name="wwulang"):
        self.module = ir.Module(name=name)
        self.function = ir.Function(self.module, ir.FunctionType(DOUBLE, []), name=CompilationContext.FUNCTION)
        self.builder = ir.IRBuilder(self.function.append_basic_block(name="entry"))

        self.symbols = {}  # dict of variable name: alloca slot
        self.errors = []   # every error hit so far, in order

    def slot(self, name):
        """Returns the storage slot of name, creating it on first write."""
        if name not in self.symbols:
            logger.debug("allocating slot for '%s'", name)
            self.symbols[name] = self.builder.alloca(DOUBLE, name=name)
        return self.symbols[name]


@dataclass(frozen=True)
class CompiledUnit:
    """Successfully lowered compilation unit. warnings holds errors from program lines whose values were not needed
    for the result (e.g. "y; 1"), which the driver may still want to report.
    """
    module: ir.Module
    function: ir.Function
    symbols: Dict[str, ir.AllocaInstr]
    tree: Program
    warnings: Tuple[WwuError, ...] = field(default=())

    @property
    def ir(self):
        """Textual LLVM IR of the unit."""
        return str(self.module)

    def __str__(self):
        return self.ir


class CodeGenerator(Visitor):
    """Visitor that emits IR into a CompilationContext. Every handler returns a Lowered result."""
    INSTRUCTIONS = {"+": "fadd", "-": "fsub", "*": "fmul", "/": "fdiv"}

    def __init__(self, context):
        self.context = context

    @property
    def builder(self):
        return self.context.builder

    def fail(self, error):
        self.context.errors.append(error)
        return Failed(error)

    def number(self, node):
        return Value(ir.Constant(DOUBLE, node.value))

    def variable(self, node):
        slot = self.context.symbols.get(node.name)
        if slot is None:
            return self.fail(UnknownVariableError(node.name))
        return Value(self.builder.load(slot, name=node.name))

    def subexpression(self, node):
        return self.visit(node.expression)

    def operation(self, node, left):
        if not left.ok:
            return left  # right-hand side is never lowered

        right = self.visit(node.operand)
        if not right.ok:
            return right

        instruction = CodeGenerator.INSTRUCTIONS.get(node.operator)
        if instruction is None:
            return self.fail(InvalidOperatorError(node.operator))
        return Value(getattr(self.builder, instruction)(left.value, right.value, name="tmp"))

    def expression(self, node):
        result = self.visit(node.first)
        for operation in node.rest:
            result = self.visit(operation, result)
        return result

    def assignment(self, node):
        result = self.visit(node.value)
        if not result.ok:
            return result

        self.builder.store(result.value, self.context.slot(node.variable))
        return result

    def program(self, node):
        result = None
        for line in node.lines:
            result = self.visit(line)
        return result


def lower(tree, source=""):
    """Lowers a Program into a CompiledUnit, or returns a LoweringFailure if its last line has no value. source is
    only used for messages.
    """
    context = CompilationContext()
    result = CodeGenerator(context).visit(tree)

    if not result.ok:
        logger.debug("lowering failed with %d error(s)", len(context.errors))
        errors = [error for error in context.errors if error is not result.error] + [result.error]
        return LoweringFailure(errors, source)  # context, and the half-built module with it, is dropped here

    context.builder.ret(result.value)
    return CompiledUnit(context.module, context.function, dict(context.symbols), tree, tuple(context.errors))
