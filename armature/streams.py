"""
Armature stream cursor.

ArgumentStream is a sequential, peekable view over the tokens of one command
invocation. It owns a zero-based position that only moves forward:

- peek() returns the token under the cursor (None at the end) without advancing.
- read() returns the token under the cursor and advances by one; reading past
  the end is reported with ExhaustedStreamError.
- rest() returns the tokens from the cursor to the end without consuming them.
- snapshot() freezes (position, remaining tokens) for fault reports.

A stream is created per parse call and never shared between calls.
"""
from typing import NamedTuple

from .faults import ExhaustedStreamError
from .tokens import lift


class StreamSnapshot(NamedTuple):
    """
    Immutable record of where a stream stood: the cursor position and the tokens
    that were still unread at that point.
    """
    position: int
    remaining: tuple

    def current(self):
        """
        The token the cursor was on, or None when the stream was exhausted.
        """
        return self.remaining[0] if self.remaining else None


class ArgumentStream:
    __slots__ = ("_source", "_position")

    def __init__(self, source=(), /):
        self._source = tuple(map(lift, source))
        self._position = 0

    @property
    def position(self):
        return self._position

    @property
    def source(self):
        return self._source

    def peek(self):
        try:
            return self._source[self._position]
        except IndexError:
            return None

    def read(self):
        token = self.peek()
        if token is None:
            raise ExhaustedStreamError(
                "expected a token at position %d but the stream is exhausted" % self._position,
                position=self._position,
            )
        self._position += 1
        return token

    def rest(self):
        return self._source[self._position:]

    def exhausted(self):
        return self._position >= len(self._source)

    def snapshot(self):
        return StreamSnapshot(self._position, self.rest())

    def __len__(self):
        return len(self._source) - self._position

    def __iter__(self):
        while not self.exhausted():
            yield self.read()

    def __repr__(self):
        return f"{type(self).__name__}(position={self._position}, rest={list(self.rest())!r})"


__all__ = (
    "ArgumentStream",
    "StreamSnapshot",
)
