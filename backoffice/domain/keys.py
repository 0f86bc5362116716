# backoffice/domain/keys.py
from __future__ import annotations

import logging
import re
from typing import Any, Callable, Mapping, Optional

log = logging.getLogger("backoffice.keys")

# "_" only folds into the next character when that character is a lowercase
# letter. "_2", "__" and a trailing "_" are kept verbatim, which is what makes
# digit-bearing storage keys round-trip.
_SNAKE_SEGMENT = re.compile(r"_([a-z])")
_UPPER = re.compile(r"[A-Z]")


def snake_to_camel(key: str) -> str:
    """
    lot_index -> lotIndex, geo_maps -> geoMaps, lot_2_area -> lot_2Area.
    """
    return _SNAKE_SEGMENT.sub(lambda m: m.group(1).upper(), key)


def camel_to_snake(key: str) -> str:
    """
    lotIndex -> lot_index, geoURL -> geo_u_r_l, lot_2Area -> lot_2_area.
    """
    return _UPPER.sub(lambda m: "_" + m.group(0).lower(), key)


def _translate(record: Optional[Mapping[str, Any]], fn: Callable[[str], str]) -> Any:
    if record is None:
        return record

    out: dict[Any, Any] = {}
    for k, v in record.items():
        nk = fn(k) if isinstance(k, str) else k
        if nk in out:
            # first-encountered key wins; e.g. {"fooBar": 1, "foo_bar": 2} in storage direction
            log.warning("key collision while translating %r -> %r; keeping first value", k, nk)
            continue
        out[nk] = v
    return out


def to_application_form(record: Optional[Mapping[str, Any]]) -> Any:
    """
    Storage convention (snake_case) -> application convention (camelCase).

    Returns a new dict with identical values; the input is not mutated and
    None passes through unchanged. Only top-level keys are translated.
    """
    return _translate(record, snake_to_camel)


def to_storage_form(record: Optional[Mapping[str, Any]]) -> Any:
    """
    Application convention (camelCase) -> storage convention (snake_case).

    Inverse of to_application_form for every key made of lowercase letters,
    digits and underscores.
    """
    return _translate(record, camel_to_snake)
