"""Error handling for wwulang. Every failure a compilation unit can hit is a WwuError; these are passed around as
values (parse and lower return them) and only turned into output by ErrorHandler. If any other type of error makes it
all the way to ErrorHandler, it is assumed to be an internal issue.
"""

import logging
import re
import sys

from termcolor import colored


logger = logging.getLogger(__name__)


class WwuError(Exception):
    """Templates an error/warning message so that it can be reported with a diagnosis of the offending source.

    msg is a str.format template filled with exprs; exprs[0] should be the offending expr. start and end delimit the
    offending span of exprs[0] (end=-1 means until the end of it).
    """

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False):
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]

        self.template = msg
        self.exprs = list(exprs)
        self.expr = self.exprs[0]
        self.end = end if end != -1 else len(self.expr)

        self.start = start
        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.format())

    @property
    def msg(self):
        return self.format()

    def format(self, highlight=str):
        """Fills the template, passing every expr through highlight first."""
        return self.template.format(*(highlight(expr) for expr in self.exprs))


class ParseFailure(WwuError):
    """Grammar did not match the entire input. position is where matching stopped."""

    def __init__(self, text, position):
        self.text = text
        self.position = position
        msg = "'{}' could not be parsed, stopped at \"{}\""
        super().__init__(msg, (text, self.remainder), start=position, end=max(len(text.rstrip()), position + 1))

    @property
    def remainder(self):
        """Unconsumed suffix of the input."""
        return self.text[self.position:]

    def __eq__(self, other):
        return isinstance(other, ParseFailure) and (self.text, self.position) == (other.text, other.position)

    def __hash__(self):
        return hash((self.text, self.position))

    def __repr__(self):
        return f"ParseFailure(text={self.text!r}, position={self.position})"


class UnknownVariableError(WwuError):
    """A variable was read before any assignment in the same compilation unit created its storage slot."""

    def __init__(self, name):
        self.name = name
        super().__init__("unknown variable '{}'", name)

    def locate(self, source):
        """Points the diagnosis at the first read of self.name in source. Assignment targets are skipped."""
        pattern = r"(?<![A-Za-z0-9]){}(?![A-Za-z0-9])(?!\s*=)".format(re.escape(self.name))
        match = re.search(pattern, source)
        if match:
            self.expr = source
            self.start, self.end = match.span()
        return self


class InvalidOperatorError(WwuError):
    """Operator outside of + - * /. The parser never produces one, so this is an internal error."""

    def __init__(self, operator):
        self.operator = operator
        super().__init__("invalid operator '{}'", operator, diagnosis=False, internal=True)


class LoweringFailure(WwuError):
    """A compilation unit's final value could not be produced. errors holds every error hit while lowering, in
    order; reason is the one that took down the final value.
    """

    def __init__(self, errors, source=""):
        assert errors, "LoweringFailure needs at least one error"
        self.errors = list(errors)
        super().__init__("'{}' produced no value: {}", (source, self.reason.msg), diagnosis=False)

    @property
    def reason(self):
        return self.errors[-1]


class ErrorHandler:
    """Context manager that will silently suppress Python errors and report wwulang errors/warnings instead."""
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True, color=True, stream=None):
        self.fatal = fatal
        self.color = color
        self.stream = stream  # None means sys.stdout at the time of printing
        self.traceback = {}

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called before running a compilation unit."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after a compilation unit succeeds."""
        self.traceback[path] = (None, None)

    def colored(self, text, color=None, attrs=None):
        return colored(text, color, attrs=attrs, no_color=not self.color)

    def diagnose(self, error, warning=False):
        """Returns offending part of error.expr highlighted and bolded, with a caret line under it."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        diagnosis = "  " + error.expr[:error.start]

        end = max(error.end, error.start + 1)
        diagnosis += self.colored(error.expr[error.start:end], color, attrs=["bold"])
        diagnosis += error.expr[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += self.colored("^" + "~" * (end - error.start - 1), color, attrs=["bold"])

        return diagnosis

    def _location(self):
        for file, (line, line_num) in self.traceback.items():
            if line is not None:
                return f"{file}:{line_num}: "
        return ""

    def _bold(self, text):
        return self.colored(text, attrs=["bold"])

    def warn(self, error):
        """Prints a non-fatal warning for error."""
        logger.debug("warning: %r", error)

        error_msg = self._bold(self._location())
        error_msg += self.colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.format(self._bold)
        print(error_msg, file=self.stream)

        if not error.internal and error.expr and error.diagnosis:
            print(self.diagnose(error, warning=True), file=self.stream)

    def throw(self, error):
        """Reports error using self.traceback. error must be a WwuError, and self.traceback must be a dict of
        file: (line, line_num) representing origination of error. Exits if self.fatal.
        """
        logger.debug("error: %r", error)

        error_msg = ""
        lines = 0
        for file, (line, line_num) in self.traceback.items():  # dicts are insertion-ordered
            if line:
                error_msg += f"  File '{file}', line {line_num}:\n"
                error_msg += f"    {line}\n"
                lines += 1

        if lines > 1:
            error_msg = "Traceback:\n" + error_msg

        if error.internal:
            error_msg += self.colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += self.colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.format(self._bold)
        print(error_msg, file=self.stream)

        if not error.internal and error.expr and error.diagnosis:
            print(self.diagnose(error), file=self.stream)

        if self.fatal:
            sys.exit(1)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(WwuError("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(WwuError("expression is nested too deeply", diagnosis=False))
        elif exc_type is not None and issubclass(exc_type, WwuError):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(WwuError("unknown error: '{}'", f"{exc_type.__name__}: {exc_val}", diagnosis=False, internal=True))
            do_exit = True

        return not do_exit
