"""Session control for wwulang. Every input line is its own compilation unit: it is parsed, printed, lowered and
(optionally) executed, and nothing about it survives into the next line.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

from wwulang.lang.codegen import CompiledUnit, lower
from wwulang.lang.config import Config
from wwulang.lang.engine import execute
from wwulang.lang.error import LoweringFailure, ParseFailure, UnknownVariableError, WwuError
from wwulang.pure.parser import parse
from wwulang.pure.printer import format_number, print_tree
from wwulang.pure.syntax import Program


logger = logging.getLogger(__name__)


@dataclass
class Result:
    """Outcome of one compilation unit."""
    source: str
    tree: Optional[Program] = None
    ast: Optional[str] = None
    unit: Optional[CompiledUnit] = None
    failure: Optional[Union[ParseFailure, LoweringFailure]] = None
    value: Optional[float] = None

    @property
    def ok(self):
        return self.failure is None


class Session:
    """Governs a wwulang session: a source of lines (a file or the command line) and how their results are shown."""
    SH_FILE = "<in>"  # command-line interpreter filename
    COMMENT = "#"

    def __init__(self, error_handler, path=SH_FILE, config=None):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path  # used for error messages
        self.config = config if config is not None else Config()

    @staticmethod
    def preprocess_line(line):
        """Strips comments and surrounding whitespace."""
        if Session.COMMENT in line:
            line = line[:line.index(Session.COMMENT)]
        return line.strip()

    def compile(self, line):
        """Runs one compilation unit over line and returns its Result. Never raises for a bad program."""
        parsed = parse(line)
        if isinstance(parsed, ParseFailure):
            return Result(line, failure=parsed)

        tree, __ = parsed
        result = Result(line, tree=tree, ast=print_tree(tree))

        lowered = lower(tree, line)
        errors = lowered.errors if isinstance(lowered, LoweringFailure) else lowered.warnings
        for error in errors:
            if isinstance(error, UnknownVariableError):
                error.locate(line)

        if isinstance(lowered, LoweringFailure):
            result.failure = lowered
            return result

        result.unit = lowered
        if self.config.execute:
            result.value = execute(lowered)
        return result

    def run(self, line, line_num=1):
        """Compiles line and reports the outcome through the error handler. Returns the Result."""
        self.error_handler.register_line(self.path, line, line_num)  # in case an error is reported
        result = self.compile(line)
        logger.debug("%s:%d: %r -> %s", self.path, line_num, line, "ok" if result.ok else "failed")

        if isinstance(result.failure, ParseFailure):
            self.error_handler.throw(result.failure)

        elif isinstance(result.failure, LoweringFailure):
            self._warn_all(result.failure.errors[:-1])
            self.error_handler.throw(result.failure.reason)

        else:
            self._warn_all(result.unit.warnings)
            if self.config.show_ast:
                print(f"AST: {result.ast}", file=self.error_handler.stream)
            if self.config.show_ir:
                print(result.unit.ir, file=self.error_handler.stream)
            if result.value is not None:
                print(format_number(result.value), file=self.error_handler.stream)

        self.error_handler.remove_line(self.path)
        return result

    def run_file(self):
        """Runs every non-blank line of self.path as an independent compilation unit."""
        try:
            with open(self.path, "r") as file:
                lines = list(file)
        except OSError:
            raise WwuError("'{}' could not be opened", self.path, diagnosis=False)

        results = []
        for line_num, line in enumerate(lines):
            line = Session.preprocess_line(line)
            if line:
                results.append(self.run(line, line_num + 1))
        return results

    def _warn_all(self, errors):
        for error in errors:
            self.error_handler.warn(error)
