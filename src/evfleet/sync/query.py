"""Query-string codec for filter state.

``status=active,maintenance&charging=charging``: one key per non-empty
filter, tokens comma-joined. Parsing is lenient: missing keys mean "no
filter" and tokens are not checked against the enums.
"""

from __future__ import annotations

from urllib.parse import parse_qs, quote_plus, urlencode

from evfleet.models.views import FilterState

_KEYS: tuple[str, ...] = ("status", "charging")
_SEPARATOR = ","


def serialize_filters(filters: FilterState) -> str:
    """Encode *filters*; empty filters produce an empty string."""
    pairs = [(key, _SEPARATOR.join(getattr(filters, key))) for key in _KEYS if getattr(filters, key)]
    return urlencode(pairs, safe=_SEPARATOR, quote_via=quote_plus)


def _split_tokens(raw: str) -> tuple[str, ...]:
    return tuple(token.strip() for token in raw.split(_SEPARATOR) if token.strip())


def parse_filters(query: str) -> FilterState:
    """Decode a query string (a leading ``?`` is accepted)."""
    text = query[1:] if query.startswith("?") else query
    params = parse_qs(text)
    values: dict[str, tuple[str, ...]] = {}
    for key in _KEYS:
        found = params.get(key)
        values[key] = _split_tokens(found[0]) if found else ()
    return FilterState(**values)
