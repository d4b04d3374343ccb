"""
The hstore text parser. This is a small state machine that walks over the raw string one pair at
a time.
"""

from __future__ import annotations

import enum
from collections.abc import Iterator

import attr

from pg_hstore.exc import (
    ExpectedSeparatorError,
    HStoreParseError,
    InternalInconsistencyError,
    InvalidEscapeError,
    UnexpectedQuoteError,
    UnterminatedQuoteError,
    UnterminatedValueError,
)
from pg_hstore.util import LoggerWithTrace

QUOTE = '"'
BACKSLASH = "\\"
EQUALS = "="
GREATER = ">"
COMMA = ","
NULL = "NULL"


class ParseState(enum.Enum):
    """
    Enumeration of the states the parser goes through for every ``key=>value,`` unit.
    """

    #: Skipping whitespace until the start of a key.
    WAITING_FOR_KEY = 1
    #: The key has been read, waiting for the ``=`` of the separator.
    WAITING_FOR_EQUALS = 2
    #: The ``=`` has been read, the ``>`` must follow immediately.
    WAITING_FOR_GREATER = 3
    #: Skipping whitespace until the start of a value.
    WAITING_FOR_VALUE = 4
    #: The value has been read, waiting for the comma (or the end of the string).
    WAITING_FOR_COMMA = 5


@attr.s(slots=True, frozen=True)
class HStorePair:
    """
    A single key/value pair out of an hstore.
    """

    #: The key of this pair. hstore doesn't allow NULL keys, so this is always a string.
    key: str = attr.ib()

    #: The value of this pair, or None if the value was an unquoted ``NULL``.
    value: str | None = attr.ib()


class HStoreParser:
    """
    Parser for the textual representation of an hstore. A parser is single use; it only ever
    moves forward over the string it was created with.
    """

    def __init__(self, raw: str, *, logger_name: str = "pg_hstore.parser") -> None:
        """
        :param raw: The raw hstore string, as returned by the server.
        :param logger_name: The name of the logger trace messages are sent to.
        """
        self._raw = raw
        self._length = len(raw)

        # the cursor is incremented *before* every read, so it always points at the last
        # character that was consumed.
        self._position = -1
        self._state = ParseState.WAITING_FOR_KEY

        self._logger = LoggerWithTrace.get(logger_name)

    @property
    def position(self) -> int:
        """
        The offset of the last character that was consumed.
        """
        return self._position

    @property
    def state(self) -> ParseState:
        """
        The current pair-level state of this parser.
        """
        return self._state

    @state.setter
    def state(self, value: ParseState) -> None:
        self._logger.trace("Parser changing state from %s to %s", self._state.name, value.name)
        self._state = value

    def next_pair(self) -> HStorePair | None:
        """
        Reads the next pair out of the string.

        :return: The next :class:`.HStorePair`, or None if there are no more pairs. Once this has
                 returned None, it will keep returning None.
        """
        return self.advance()

    def advance(self) -> HStorePair | None:
        """
        Scans forward from the current position until a full pair has been read.
        """
        key: str | None = None
        value: str | None = None
        self.state = ParseState.WAITING_FOR_KEY

        # the end of the string is also the end of the last pair, hence the bound: a string that
        # finishes right after a value simply leaves us in WAITING_FOR_COMMA.
        while self._position < self._length - 1:
            self._position += 1
            ch = self._raw[self._position]
            state = self._state

            if state == ParseState.WAITING_FOR_KEY:
                if ch.isspace():
                    continue

                if ch == QUOTE:
                    key = self._advance_quoted()
                else:
                    # NULL keys don't exist, so an unquoted NULL key is just the string "NULL"
                    key = self._advance_word(EQUALS)

                self.state = ParseState.WAITING_FOR_EQUALS

            elif state == ParseState.WAITING_FOR_EQUALS:
                if ch.isspace():
                    continue

                if ch != EQUALS:
                    raise ExpectedSeparatorError(
                        "Expected '=>' key-value separator", self._position
                    )

                self.state = ParseState.WAITING_FOR_GREATER

            elif state == ParseState.WAITING_FOR_GREATER:
                if ch != GREATER:
                    raise ExpectedSeparatorError(
                        "Expected '=>' key-value separator", self._position
                    )

                self.state = ParseState.WAITING_FOR_VALUE

            elif state == ParseState.WAITING_FOR_VALUE:
                if ch.isspace():
                    continue

                if ch == QUOTE:
                    value = self._advance_quoted()
                else:
                    value = self._advance_word(COMMA)
                    if value.upper() == NULL:
                        value = None

                self.state = ParseState.WAITING_FOR_COMMA

            elif state == ParseState.WAITING_FOR_COMMA:
                if ch.isspace():
                    continue

                if ch != COMMA:
                    raise UnterminatedValueError(
                        f"Cannot find comma as an end of the value: {self._raw!r}", self._position
                    )

                break

            else:
                raise InternalInconsistencyError(f"Unknown parser state {state}", self._position)

        if self._state == ParseState.WAITING_FOR_KEY:
            # only whitespace was left
            return None

        if self._state != ParseState.WAITING_FOR_COMMA:
            raise UnterminatedValueError("Unexpected end of string", self._position)

        if key is None:
            raise InternalInconsistencyError("Internal parsing error", self._position)

        pair = HStorePair(key, value)
        self._logger.trace("Parsed pair %r ending at position %d", pair, self._position)
        return pair

    def _advance_quoted(self) -> str:
        """
        Reads a quoted token. The cursor must be on the opening quote, and is left on the closing
        quote.
        """
        first_quote_position = self._position
        # stays None until the first escape, up until then the token is a plain slice of the input
        buffer: list[str] | None = None

        while self._position < self._length - 1:
            self._position += 1
            ch = self._raw[self._position]

            if ch == BACKSLASH:
                next_position = self._position + 1
                if next_position >= self._length or self._raw[next_position] not in (
                    QUOTE,
                    BACKSLASH,
                ):
                    raise InvalidEscapeError(
                        "Backslash without following backslash or quote", self._position
                    )

                if buffer is None:
                    buffer = [self._raw[first_quote_position + 1 : self._position]]

                buffer.append(self._raw[next_position])
                self._position = next_position

            elif ch == QUOTE:
                break

            elif buffer is not None:
                buffer.append(ch)

        else:
            raise UnterminatedQuoteError(
                f"Quote at string position {first_quote_position} is not closed",
                first_quote_position,
            )

        if buffer is None:
            return self._raw[first_quote_position + 1 : self._position]

        return "".join(buffer)

    def _advance_word(self, stop_at: str) -> str:
        """
        Reads an unquoted token, up to whitespace, ``stop_at``, or the end of the string. The
        cursor must be on the first character of the word, and is left on the last one.
        """
        first_word_position = self._position

        while self._position < self._length:
            ch = self._raw[self._position]
            if ch == QUOTE:
                raise UnexpectedQuoteError("Unexpected quote in word", self._position)

            if ch.isspace() or ch == stop_at:
                break

            self._position += 1

        # step back, we're one character past the word
        self._position -= 1
        return self._raw[first_word_position : self._position + 1]


class HStoreIterator(Iterator[HStorePair]):
    """
    Lazily produces the pairs of an hstore string. The next pair is always parsed ahead of time,
    so :attr:`has_next` doesn't consume anything.

    If parsing fails, the error is raised from the call that triggered it, and the same error is
    raised again on every following call.
    """

    def __init__(self, parser: HStoreParser) -> None:
        self._parser = parser
        self._error: HStoreParseError | None = None
        self._next_pair = self._parser.next_pair()

    @property
    def has_next(self) -> bool:
        """
        If there is at least one more pair to be pulled off this iterator.
        """
        return self._next_pair is not None

    def __iter__(self) -> HStoreIterator:
        return self

    def __next__(self) -> HStorePair:
        if self._error is not None:
            raise self._error

        if self._next_pair is None:
            raise StopIteration

        pair = self._next_pair
        try:
            self._next_pair = self._parser.next_pair()
        except HStoreParseError as e:
            self._next_pair = None
            self._error = e
            raise

        return pair


def parse(raw: str, *, logger_name: str = "pg_hstore.parser") -> HStoreIterator:
    """
    Parses an hstore string lazily.

    :param raw: The raw hstore string.
    :param logger_name: The name of the logger trace messages are sent to.
    :return: An iterator over the :class:`.HStorePair` instances of the string, in order.
    """
    return HStoreIterator(HStoreParser(raw, logger_name=logger_name))
