"""Conversion of baker's typed value encoding into plain JSON.

The backend encodes every ingredient value as a small tagged object::

    {"typ": 0}                                  null
    {"typ": 1, "val": [<value>, ...]}           list
    {"typ": 2, "val": {"field": <value>, ...}}  record
    {"typ": 3, "styp": "Int", "val": "42"}      primitive

Primitive values may arrive as strings; `styp` (a short or fully qualified
JVM type name) decides how they are parsed.
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any


logger = logging.getLogger(__name__)

NULL_VALUE = 0
LIST_VALUE = 1
RECORD_VALUE = 2
PRIMITIVE_VALUE = 3

_INTEGER_TYPES = {"int", "integer", "long", "short", "byte", "bigint", "biginteger"}
_DECIMAL_TYPES = {"double", "float", "bigdecimal"}
_BOOLEAN_TYPES = {"boolean", "bool"}


def _short_type_name(styp: object) -> str:
    # "java.lang.Integer" -> "integer", "scala.math.BigDecimal" -> "bigdecimal"
    return str(styp).rsplit(".", 1)[-1].lower()


def _primitive_to_json(styp: object, val: Any) -> Any:
    if not isinstance(val, str):
        return val
    type_name = _short_type_name(styp)
    try:
        if type_name in _INTEGER_TYPES:
            return int(val)
        if type_name in _DECIMAL_TYPES:
            return float(Decimal(val))
    except (ValueError, InvalidOperation):
        logger.warning("Unparseable %s primitive; keeping raw string", type_name)
        return val
    if type_name in _BOOLEAN_TYPES:
        return val.strip().lower() == "true"
    return val


def value_to_json(value: Any) -> Any:
    """Convert one baker value into its plain JSON equivalent.

    Anything that does not look like a baker value is returned unchanged, so
    already-plain payloads pass through.
    """
    if not isinstance(value, dict) or "typ" not in value:
        return value

    typ = value.get("typ")
    val = value.get("val")
    if typ == NULL_VALUE:
        return None
    if typ == LIST_VALUE:
        if val is None:
            return []
        if not isinstance(val, list):
            logger.warning("List value carries a non-list val; passing value through")
            return value
        return [value_to_json(item) for item in val]
    if typ == RECORD_VALUE:
        if val is None:
            return {}
        if not isinstance(val, dict):
            logger.warning("Record value carries a non-object val; passing value through")
            return value
        return {key: value_to_json(item) for key, item in val.items()}
    if typ == PRIMITIVE_VALUE:
        return _primitive_to_json(value.get("styp"), val)

    logger.warning("Unknown baker value type tag %r; passing value through", typ)
    return value


def ingredients_to_json(ingredients: dict[str, Any]) -> dict[str, Any]:
    """Convert every value of an ingredient mapping."""
    return {name: value_to_json(value) for name, value in ingredients.items()}
