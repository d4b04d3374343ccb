from __future__ import annotations

import logging
from collections.abc import Iterable

import attr

from pg_hstore.exc import HStoreParseError, IllegalStateError
from pg_hstore.parser import HStoreIterator, HStorePair, HStoreParser

logger = logging.getLogger(__name__)

#: The PostgreSQL type name of hstore values.
HSTORE_TYPE_NAME = "hstore"


@attr.s(slots=True)
class HStore(Iterable[HStorePair]):
    """
    Holder for the raw textual value of an hstore column. Every iteration parses the raw value
    from scratch, so a single holder can be iterated as many times as wanted.
    """

    #: The raw hstore string. None is treated the same as an empty hstore.
    value: str | None = attr.ib(default=None)

    #: The database type name of this value.
    type: str = attr.ib(default=HSTORE_TYPE_NAME, kw_only=True)

    def set_value(self, raw: str | None) -> None:
        """
        Replaces the raw value held by this object.
        """
        if self.type != HSTORE_TYPE_NAME:
            raise IllegalStateError(
                f"HStore database type name should be {HSTORE_TYPE_NAME!r}, not {self.type!r}"
            )

        self.value = raw

    def __iter__(self) -> HStoreIterator:
        return HStoreIterator(HStoreParser(self.value or ""))

    def pairs(self) -> list[HStorePair]:
        """
        Parses all of the pairs in this value, in the order they were written.
        """
        return list(self)

    def as_map(self) -> dict[str, str | None]:
        """
        Converts this value into a dictionary. Keys are ordered by their first appearance; if a
        key is repeated, the last value wins.

        :raises IllegalStateError: If the raw value can't be parsed. The original
                                   :class:`.HStoreParseError` is chained as the cause.
        """
        result: dict[str, str | None] = {}

        try:
            for pair in self:
                result[pair.key] = pair.value
        except HStoreParseError as e:
            logger.debug(f"Failed to parse hstore value {self.value!r}: {e}")
            raise IllegalStateError(f"Invalid hstore value: {e}") from e

        return result


def to_ordered_map(raw: str) -> dict[str, str | None]:
    """
    Parses an hstore string into an insertion-ordered dictionary.
    """
    return HStore(raw).as_map()
