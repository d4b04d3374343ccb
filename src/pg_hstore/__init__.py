# flake8: noqa

import logging
from pg_hstore.exc import (
    HStoreError as HStoreError,
    HStoreParseError as HStoreParseError,
    ExpectedSeparatorError as ExpectedSeparatorError,
    UnterminatedQuoteError as UnterminatedQuoteError,
    InvalidEscapeError as InvalidEscapeError,
    UnexpectedQuoteError as UnexpectedQuoteError,
    UnterminatedValueError as UnterminatedValueError,
    InternalInconsistencyError as InternalInconsistencyError,
    IllegalStateError as IllegalStateError,
)
from pg_hstore.hstore import (
    HStore as HStore,
    to_ordered_map as to_ordered_map,
)
from pg_hstore.parser import (
    HStoreIterator as HStoreIterator,
    HStorePair as HStorePair,
    HStoreParser as HStoreParser,
    ParseState as ParseState,
    parse as parse,
)
from pg_hstore.util import TRACE as _TRACE


logging.addLevelName(_TRACE, "TRACE")
del logging
