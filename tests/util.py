from collections.abc import Iterable

from pg_hstore import HStorePair


def _quote(s: str) -> str:
    return '"' + s.replace("\\", "\\\\").replace('"', '\\"') + '"'


def serialize_pairs(pairs: Iterable[HStorePair]) -> str:
    """
    Serializes pairs back into the textual hstore format, the same way the server outputs them.
    """
    return ", ".join(
        f"{_quote(p.key)}=>{'NULL' if p.value is None else _quote(p.value)}" for p in pairs
    )
