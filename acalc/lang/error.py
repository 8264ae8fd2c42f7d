"""Error handling for acalc. Only GenericExceptions should be encountered during running: if another type of error is
raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Every pipeline error points at a byte range (a Span) of a named source text (a Source). Rendering is done here, not by
the pipeline stages: a stage only has to build the error with the right span.
"""

import sys
from dataclasses import dataclass

from termcolor import colored


@dataclass(frozen=True)
class Span:
    """Byte range into a source text, given as start offset and length in bytes."""
    start: int
    length: int

    @property
    def end(self):
        return self.start + self.length

    @classmethod
    def cover(cls, first, last):
        """Smallest span containing both first and last."""
        start = min(first.start, last.start)
        return cls(start, max(first.end, last.end) - start)


@dataclass(frozen=True)
class Source:
    """Named text that spans point into."""
    name: str
    text: str

    UNKNOWN = "<unknown>"

    @classmethod
    def unknown(cls):
        """Placeholder for stages run on items that did not come from a known text."""
        return cls(cls.UNKNOWN, "")


class GenericException(Exception):
    """Templates an error message so that it can be thrown as an acalc error. exprs are formatted
    into msg (and bolded when displayed).
    """

    def __init__(self, msg, exprs=None, source=None, span=None, diagnosis=True, internal=False):
        if exprs is None:
            exprs = ()
        if isinstance(exprs, str):
            exprs = (exprs,)

        super().__init__(msg.format(*exprs))
        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.source = source if source is not None else Source.unknown()
        self.span = span

        self.diagnosis = diagnosis and span is not None
        self.internal = internal

    def location(self):
        """Returns (line, column, line text) of the start of self.span. line and column are 1-based, and column is
        counted in characters rather than bytes.
        """
        encoded = self.source.text.encode("utf-8")
        before = encoded[:self.span.start].decode("utf-8", errors="replace")

        line = before.count("\n") + 1
        line_start = before.rfind("\n") + 1
        column = len(before) - line_start + 1

        line_end = self.source.text.find("\n", line_start)
        if line_end == -1:
            line_end = len(self.source.text)

        return line, column, self.source.text[line_start:line_end]

    def __eq__(self, other):
        return type(self) is type(other) and (self.args, self.source, self.span) == (other.args, other.source,
                                                                                       other.span)

    def __hash__(self):
        return hash((type(self), self.args, self.span))


class UnexpectedCharacter(GenericException):
    """Tokenizer met a character outside of digits, '+' and whitespace."""

    def __init__(self, char, source, span):
        super().__init__("unexpected character '{}'", char, source, span)
        self.char = char


class UnexpectedToken(GenericException):
    """Parser met a token in a position the grammar forbids."""

    def __init__(self, token, source, span):
        super().__init__("unexpected token '{}'", str(token), source, span)
        self.token = token


class UnexpectedEndOfInput(GenericException):
    """Parser ran out of tokens after an operator."""

    def __init__(self, source, span):
        super().__init__("reached end of input mid-expression", source=source, span=span)


class InvalidNumber(GenericException):
    """Evaluator could not fit a literal into a 32-bit integer."""

    def __init__(self, literal, source, span):
        super().__init__("'{}' is not a valid 32-bit integer", literal, source, span)
        self.literal = literal


class ArithmeticOverflow(GenericException):
    """Result of an operation does not fit into a 32-bit integer."""

    def __init__(self, expr, source, span):
        super().__init__("'{}' overflows a 32-bit integer", expr, source, span)


class InvalidEncoding(GenericException):
    """Input could not be decoded. Raised before any pipeline stage runs, so it has no span."""

    def __init__(self, name):
        super().__init__("'{}' is not valid UTF-8", name, diagnosis=False)


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom acalc errors."""
    ERROR = "red"

    def __init__(self, fatal=True, trace=False, file=None):
        self.fatal = fatal
        self.trace = trace
        self.file = file if file is not None else sys.stdout

    @staticmethod
    def diagnose(error):
        """Returns the line containing error.span, with the offending part highlighted and underlined."""
        color = ErrorHandler.ERROR
        __, column, line = error.location()

        start = column - 1
        offending = error.source.text.encode("utf-8")[error.span.start:error.span.end].decode("utf-8", "replace")
        end = start + len(offending.split("\n")[0])

        diagnosis = "  " + line[:start]
        diagnosis += colored(line[start:end], color, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += colored("^" + "~" * (end - start - 1), color, attrs=["bold"])

        return diagnosis

    @staticmethod
    def header(error):
        """Returns 'name:line:col: ' for error, or just 'name: ' if error does not point anywhere."""
        if not error.diagnosis:
            return f"{error.source.name}: " if error.source.name != Source.UNKNOWN else ""
        line, column, __ = error.location()
        return f"{error.source.name}:{line}:{column}: "

    def _print(self, msg):
        print(msg, file=self.file)

    def register_step(self, stage, item):
        """Prints item produced by stage if tracing is on."""
        if self.trace:
            self._print(colored(f"[{stage}] {item!r}", attrs=["dark"]))

    def throw(self, error):
        """Prints error, which must be a GenericException. Exits if self.fatal."""
        error_msg = colored(ErrorHandler.header(error), attrs=["bold"])

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        self._print(error_msg)

        if not error.internal and error.diagnosis:
            self._print(ErrorHandler.diagnose(error))

        if self.fatal:
            sys.exit(1)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException("unknown error: '{}: {}'", (exc_type.__name__, str(exc_val)), internal=True))
            do_exit = True

        return not do_exit
