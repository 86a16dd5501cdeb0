"""
MiniTree Key Admission
======================
A tree orders a single kind of totally-ordered scalar key.

Kinds:
  NUMBER → int or float (mixable). bool is rejected even though it
           subclasses int.
  STRING → str
  DATE   → datetime.date. datetime.datetime is rejected: it does not
           compare against plain dates.

Rejected everywhere:
  None → NULL keys are not indexable
  NaN  → not totally ordered (NaN != NaN breaks the search invariant)
  -0.0 is normalized to 0.0.
"""

import math
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from bst.errors import InvalidArgumentError


class KeyKind(Enum):
    """Key families a tree can be built over."""
    NUMBER = "NUMBER"
    STRING = "STRING"
    DATE = "DATE"


def key_kind(value: Any) -> KeyKind:
    """
    Classify a key value.

    Raises InvalidArgumentError for None, NaN, bool and unsupported types.
    """
    if value is None:
        raise InvalidArgumentError("NULL keys cannot be indexed")
    if isinstance(value, bool):
        raise InvalidArgumentError("Boolean keys cannot be indexed")
    if isinstance(value, int):
        return KeyKind.NUMBER
    if isinstance(value, float):
        if math.isnan(value):
            raise InvalidArgumentError("NaN keys cannot be indexed")
        return KeyKind.NUMBER
    if isinstance(value, str):
        return KeyKind.STRING
    if isinstance(value, datetime):
        raise InvalidArgumentError("datetime keys cannot be indexed; use a date")
    if isinstance(value, date):
        return KeyKind.DATE
    raise InvalidArgumentError(f"Unsupported key type: {type(value).__name__}")


def admit_key(value: Any, expected: Optional[KeyKind]) -> Any:
    """
    Validate a key against the kind a tree already holds and return it
    normalized. expected=None means the tree is empty and any kind is accepted.
    """
    kind = key_kind(value)
    if expected is not None and kind is not expected:
        raise InvalidArgumentError(
            f"Key {value!r} is {kind.value}, tree holds {expected.value} keys"
        )
    if isinstance(value, float) and value == 0.0:
        return 0.0
    return value
