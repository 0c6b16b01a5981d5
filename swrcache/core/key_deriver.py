"""Turns a call's arguments into a stable string cache key.

Two calls share a key iff their arguments are deep-equal once rendered as
canonical JSON. Zero-argument calls map to ``ZERO_ARGS_KEY``, which no
non-empty argument list can produce (those render as a JSON array or object).

Known JSON coercions, so they are documented rather than surprising:
tuples render like lists, and dict keys are coerced to strings, so
``{1: "a"}`` and ``{"1": "a"}`` derive the same key. Anything JSON cannot
represent (cycles, sets, bytes, arbitrary objects, NaN) raises
``KeyDerivationError`` instead of degrading to a colliding key.
"""

import json
from typing import Any, Mapping, Optional, Sequence

from swrcache.domain.exceptions import KeyDerivationError
from swrcache.domain.models.common import CacheKey

ZERO_ARGS_KEY = CacheKey("_")


def _reject(value: Any) -> Any:
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def derive_key(args: Sequence[Any], kwargs: Optional[Mapping[str, Any]] = None) -> CacheKey:
    """Derives the cache key for one call.

    Args:
        args: Positional arguments, in order.
        kwargs: Keyword arguments. Their order does not affect the key.

    Returns:
        The canonical key.

    Raises:
        KeyDerivationError: If an argument cannot be serialized canonically.
    """
    if not args and not kwargs:
        return ZERO_ARGS_KEY

    document: Any = list(args)
    if kwargs:
        # An object, so it can never equal a positional-only array
        document = {"args": list(args), "kwargs": dict(kwargs)}

    try:
        return CacheKey(json.dumps(
            document,
            separators=(",", ":"),
            sort_keys=True,
            ensure_ascii=False,
            allow_nan=False,
            default=_reject,
        ))
    except (TypeError, ValueError) as e:
        raise KeyDerivationError(f"Cannot derive a cache key from call arguments: {e}", e) from e
