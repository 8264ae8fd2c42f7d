"""Session control for acalc. Runs the lexer, parser and evaluator over one source text, either read from a file,
from standard input, or typed in command-line mode.
"""

from acalc.lang.error import GenericException, InvalidEncoding, Source
from acalc.pure.lexical import Lexer
from acalc.pure.numerical import Evaluator
from acalc.pure.syntax import Parser


class Session:
    """Governs one evaluation pass over a source text."""
    SH_FILE = "<in>"      # command-line interpreter filename
    STDIN = "<stdin>"

    def __init__(self, error_handler, name, text):
        self.error_handler = error_handler
        self.source = Source(name, text)
        self.results = []

    @classmethod
    def from_path(cls, error_handler, path):
        """Reads and decodes the file at path."""
        try:
            with open(path, "rb") as file:
                raw = file.read()
        except OSError:
            raise GenericException("'{}' could not be opened", path, diagnosis=False)
        return cls(error_handler, path, Session.decode(raw, path))

    @classmethod
    def from_stream(cls, error_handler, stream, name=STDIN):
        """Reads and decodes all of binary stream."""
        return cls(error_handler, name, Session.decode(stream.read(), name))

    @staticmethod
    def decode(raw, name):
        """Strictly decodes raw as UTF-8. Raises InvalidEncoding before anything is lexed."""
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError:
            raise InvalidEncoding(name)

    def stages(self):
        """Returns the lazy value stream for this session's source, tracing every intermediate item."""
        tokens = self._traced("lex", Lexer(self.source.text, self.source.name))
        trees = self._traced("parse", Parser(tokens, self.source))
        return self._traced("eval", Evaluator(trees, self.source))

    def _traced(self, stage, items):
        for item in items:
            self.error_handler.register_step(stage, item)
            yield item

    def run(self, echo=False, render=repr):
        """Pulls every value out of the pipeline into self.results, printing render(value) as each one comes if echo.
        The first error is raised and stops the run, but values produced (and printed) before it are kept.
        """
        for value in self.stages():
            self.results.append(value)
            if echo:
                print(render(value))
        return self.results
