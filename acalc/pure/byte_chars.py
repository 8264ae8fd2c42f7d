"""Character iteration with byte accounting. Diagnostics point at byte ranges of the UTF-8 encoded source, so the
lexer needs to know how many bytes it has consumed, not how many characters.
"""


class ByteChars:
    """Iterates over the characters of text while remembering the byte position reached in text."""

    def __init__(self, text):
        self._chars = iter(text)
        self._next = None
        self.bytes = 0

    def peek(self):
        """Returns the next character without consuming it, or None at end of text."""
        if self._next is None:
            self._next = next(self._chars, None)
        return self._next

    def __iter__(self):
        return self

    def __next__(self):
        char = self.peek()
        if char is None:
            raise StopIteration

        self._next = None
        self.bytes += len(char.encode("utf-8"))
        return char
