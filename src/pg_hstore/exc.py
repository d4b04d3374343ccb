from __future__ import annotations


class HStoreError(Exception):
    """
    Base exception class all other exceptions are derived from.
    """


class HStoreParseError(HStoreError):
    """
    Base exception class for all hstore parsing related errors.
    """

    def __init__(self, message: str, position: int) -> None:
        super().__init__(message, position)

        #: The human-readable description of the failure.
        self.message = message
        #: The offset into the raw string where the failure was detected.
        self.position = position

    def __str__(self) -> str:
        return f"{self.message} (at position {self.position})"


class ExpectedSeparatorError(HStoreParseError):
    """
    Raised when the ``=>`` separator between a key and a value is missing or malformed.
    """


class UnterminatedQuoteError(HStoreParseError):
    """
    Raised when a quoted token is never closed. The position is the one of the opening quote.
    """


class InvalidEscapeError(HStoreParseError):
    """
    Raised when a backslash inside a quoted token is followed by anything other than a quote or
    another backslash.
    """


class UnexpectedQuoteError(HStoreParseError):
    """
    Raised when a quote is found inside an unquoted token.
    """


class UnterminatedValueError(HStoreParseError):
    """
    Raised when a pair isn't followed by a comma, or the string ends in the middle of a pair.
    """


class InternalInconsistencyError(HStoreParseError):
    """
    Raised when the parser ends up somewhere it should never be able to get to.
    """


class IllegalStateError(HStoreError):
    """
    Raised when an operation is attempted that would result in an illegal state.
    """
