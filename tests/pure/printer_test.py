import unittest

from wwulang.pure.parser import parse
from wwulang.pure.printer import Printer, Visitor, format_number, print_tree
from wwulang.pure.syntax import Assignment, Expression, Number, Operation, SubExpression, VariableRef


def printed(text):
    tree, __ = parse(text)
    return print_tree(tree)


class PrinterTestCase(unittest.TestCase):

    def test_print_tree(self):
        cases = {
            "1": "1",
            "2.5": "2.5",
            "x": "x",
            "8-3-2": "8 3 - 2 -",
            "2+3*4": "2 3 4 * +",
            "(2+3)*4": "2 3 + 4 *",
            "10/4": "10 4 /",
            "x = 1 + 2": "1 2 + =x",
            "x=5;y=x+2;y*3": "5 =x; x 2 + =y; y 3 *",
            "((7))": "7",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, printed(case), case)

    def test_print_nodes(self):
        cases = {
            Number(3.0): "3",
            VariableRef("abc"): "abc",
            Operation("-", Number(1.0)): "1 -",
            Expression(VariableRef("a"), (Operation("*", VariableRef("b")),)): "a b *",
            Assignment("z", Expression(Number(0.25))): "0.25 =z",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, print_tree(case), case)

    def test_order_preserved(self):
        should_equal = [
            ("2 + 3", "2+3"),
            ("(2+3)", "2+3"),
            ("a*(b)", "a * b"),
            ("1-2-3", "(1-2)-3"),
        ]
        for first, second in should_equal:
            self.assertEqual(printed(first), printed(second), first)

        should_differ = [("1-(2-3)", "1-2-3"), ("2*3+4", "2*(3+4)"), ("a-b", "b-a")]
        for first, second in should_differ:
            self.assertNotEqual(printed(first), printed(second), first)

    def test_order_follows_tree(self):
        def tokens(node):
            # operands left to right, each operator after its right operand
            if isinstance(node, Number):
                return [format_number(node.value)]
            if isinstance(node, VariableRef):
                return [node.name]
            if isinstance(node, SubExpression):
                return tokens(node.expression)
            if isinstance(node, Assignment):
                return tokens(node.value) + ["=" + node.variable]
            result = tokens(node.first)
            for operation in node.rest:
                result += tokens(operation.operand) + [operation.operator]
            return result

        cases = ["8-3-2", "1-(2-3)", "a/b*c", "2*3+4", "2*(3+4)", "x = 1 - 2 / (3 + y)", "b=a-1; a-b; c"]
        for case in cases:
            tree, __ = parse(case)
            for line in tree.lines:
                self.assertEqual(tokens(line), print_tree(line).split(), case)

    def test_deterministic(self):
        cases = ["x=5;y=x+2;y*3", "1/2/3", "(((1)+2)*3)-4"]
        for case in cases:
            self.assertEqual(printed(case), printed(case), case)

    def test_visit_rejects_foreign_nodes(self):
        should_raise = ["1", 1.0, None, [Number(1.0)]]
        for case in should_raise:
            self.assertRaises(TypeError, Printer().visit, case)

    def test_visitor_is_exhaustive(self):
        class Incomplete(Visitor):
            def number(self, node):
                return node.value

        self.assertRaises(TypeError, Incomplete)


class FormatNumberTestCase(unittest.TestCase):

    def test_format_number(self):
        cases = {2.0: "2", -3.0: "-3", 2.5: "2.5", 0.1: "0.1", 1e20: "1e+20", float("inf"): "inf"}
        for case, expected in cases.items():
            self.assertEqual(expected, format_number(case), case)


if __name__ == '__main__':
    unittest.main()
