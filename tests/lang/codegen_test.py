import unittest

from wwulang.lang.codegen import CompilationContext, CompiledUnit, lower
from wwulang.lang.error import InvalidOperatorError, LoweringFailure, UnknownVariableError
from wwulang.pure.parser import parse
from wwulang.pure.syntax import Expression, Number, Operation, Program


def compile_line(text):
    tree, __ = parse(text)
    return lower(tree, text)


class LowerTestCase(unittest.TestCase):

    def test_lower(self):
        should_pass = ["5", "8-3-2", "2+3*4", "(2+3)*4", "x=5;y=x+2;y*3", "10/4", "x = 1", "y; 1"]
        for case in should_pass:
            self.assertIsInstance(compile_line(case), CompiledUnit, case)

        should_fail = ["y+1", "x=5; y", "1; y", "x = y; x", "(a)", "x = 1; x + q * 2"]
        for case in should_fail:
            self.assertIsInstance(compile_line(case), LoweringFailure, case)

    def test_instructions(self):
        cases = {"1+2": "fadd", "1-2": "fsub", "1*2": "fmul", "1/2": "fdiv"}
        for case, instruction in cases.items():
            self.assertIn(f"= {instruction} double", compile_line(case).ir, case)

    def test_single_entry_block(self):
        unit = compile_line("x=5;y=x+2;y*3")
        self.assertEqual(1, len(unit.function.blocks))
        self.assertEqual("entry", unit.function.blocks[0].name)
        self.assertTrue(unit.function.blocks[0].is_terminated)
        self.assertIn("ret double", unit.ir)

    def test_storage_slots(self):
        unit = compile_line("x=5;y=x+2;y*3")
        self.assertEqual(["x", "y"], list(unit.symbols))
        self.assertEqual(2, unit.ir.count("alloca"))
        self.assertEqual(2, unit.ir.count("store"))

        # reassignment reuses the slot created by the first write
        unit = compile_line("x = 1; x = x + 1; x")
        self.assertEqual(1, unit.ir.count("alloca"))
        self.assertEqual(2, unit.ir.count("store"))

    def test_unknown_variable(self):
        failure = compile_line("y+1")
        self.assertIsInstance(failure.reason, UnknownVariableError)
        self.assertEqual("y", failure.reason.name)
        self.assertEqual(1, len(failure.errors))

    def test_failure_short_circuits(self):
        # the right-hand side of a failed left value is never lowered
        failure = compile_line("a + b * c")
        self.assertEqual(["a"], [error.name for error in failure.errors])

        failure = compile_line("1 + b - c")
        self.assertEqual(["b"], [error.name for error in failure.errors])

    def test_failed_assignment_creates_no_slot(self):
        failure = compile_line("x = y; x")
        self.assertEqual(["y", "x"], [error.name for error in failure.errors])
        self.assertEqual("x", failure.reason.name)

    def test_result_is_last_line(self):
        unit = compile_line("y; 1")
        self.assertIsInstance(unit, CompiledUnit)
        self.assertEqual(1, len(unit.warnings))
        self.assertEqual("y", unit.warnings[0].name)

        failure = compile_line("1; y")
        self.assertEqual("y", failure.reason.name)

    def test_units_are_isolated(self):
        self.assertIsInstance(compile_line("x = 1"), CompiledUnit)
        self.assertIsInstance(compile_line("x"), LoweringFailure)

        first, second = compile_line("a = 1; a"), compile_line("a = 2; a")
        self.assertIsNot(first.module, second.module)
        self.assertIsNot(first.symbols["a"], second.symbols["a"])

    def test_invalid_operator(self):
        tree = Program((Expression(Number(1.0), (Operation("%", Number(2.0)),)),))
        failure = lower(tree)
        self.assertIsInstance(failure, LoweringFailure)
        self.assertIsInstance(failure.reason, InvalidOperatorError)
        self.assertTrue(failure.reason.internal)


class CompilationContextTestCase(unittest.TestCase):

    def test_slot(self):
        context = CompilationContext()
        slot = context.slot("x")
        self.assertIs(slot, context.slot("x"))
        self.assertIsNot(slot, context.slot("y"))
        self.assertEqual({"x", "y"}, set(context.symbols))

    def test_fresh_state(self):
        first, second = CompilationContext(), CompilationContext()
        first.slot("x")
        self.assertEqual({}, second.symbols)
        self.assertEqual([], second.errors)


if __name__ == '__main__':
    unittest.main()
