"""Typed value families and value coercion.

Every scalar value lands in exactly one storage family: string ("S"),
integer ("I") or double ("D"). The declared XSD type picks a natural family;
a value that does not parse under it is reinterpreted by trying integer,
then double, then string, so that every non-empty input yields one record.

Example:
    >>> coerce("25.5", DataTypeDefXsd.XS_DOUBLE)
    CoercedValue(family=<ValueFamily.DOUBLE: 'D'>, value=25.5, fallback=False)
    >>> coerce("abc", DataTypeDefXsd.XS_INT).family
    <ValueFamily.STRING: 'S'>
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Final

from aasdb.document.identifiers import DataTypeDefXsd


class ValueFamily(str, Enum):
    """Storage family of a scalar value (value of ``t_value``)."""

    STRING = "S"
    INTEGER = "I"
    DOUBLE = "D"


DATA_TYPE_FAMILIES: Final[dict[DataTypeDefXsd, ValueFamily]] = {
    DataTypeDefXsd.XS_ANY_URI: ValueFamily.STRING,
    DataTypeDefXsd.XS_BASE64_BINARY: ValueFamily.STRING,
    DataTypeDefXsd.XS_BOOLEAN: ValueFamily.STRING,
    DataTypeDefXsd.XS_BYTE: ValueFamily.INTEGER,
    DataTypeDefXsd.XS_DATE: ValueFamily.STRING,
    DataTypeDefXsd.XS_DATE_TIME: ValueFamily.STRING,
    DataTypeDefXsd.XS_DECIMAL: ValueFamily.STRING,
    DataTypeDefXsd.XS_DOUBLE: ValueFamily.DOUBLE,
    DataTypeDefXsd.XS_DURATION: ValueFamily.STRING,
    DataTypeDefXsd.XS_FLOAT: ValueFamily.DOUBLE,
    DataTypeDefXsd.XS_G_DAY: ValueFamily.STRING,
    DataTypeDefXsd.XS_G_MONTH: ValueFamily.STRING,
    DataTypeDefXsd.XS_G_MONTH_DAY: ValueFamily.STRING,
    DataTypeDefXsd.XS_G_YEAR: ValueFamily.STRING,
    DataTypeDefXsd.XS_G_YEAR_MONTH: ValueFamily.STRING,
    DataTypeDefXsd.XS_HEX_BINARY: ValueFamily.STRING,
    DataTypeDefXsd.XS_INT: ValueFamily.INTEGER,
    DataTypeDefXsd.XS_INTEGER: ValueFamily.INTEGER,
    DataTypeDefXsd.XS_LONG: ValueFamily.INTEGER,
    DataTypeDefXsd.XS_NEGATIVE_INTEGER: ValueFamily.INTEGER,
    DataTypeDefXsd.XS_NON_NEGATIVE_INTEGER: ValueFamily.INTEGER,
    DataTypeDefXsd.XS_NON_POSITIVE_INTEGER: ValueFamily.INTEGER,
    DataTypeDefXsd.XS_POSITIVE_INTEGER: ValueFamily.INTEGER,
    DataTypeDefXsd.XS_SHORT: ValueFamily.INTEGER,
    DataTypeDefXsd.XS_STRING: ValueFamily.STRING,
    DataTypeDefXsd.XS_TIME: ValueFamily.STRING,
    DataTypeDefXsd.XS_UNSIGNED_BYTE: ValueFamily.INTEGER,
    DataTypeDefXsd.XS_UNSIGNED_INT: ValueFamily.INTEGER,
    DataTypeDefXsd.XS_UNSIGNED_LONG: ValueFamily.INTEGER,
    DataTypeDefXsd.XS_UNSIGNED_SHORT: ValueFamily.INTEGER,
}

# Integer values are stored as signed 64-bit
INT64_MIN: Final[int] = -(2**63)
INT64_MAX: Final[int] = 2**63 - 1

_INTEGER_PATTERN = re.compile(r"^\s*[+-]?\d+\s*$", re.ASCII)
_DOUBLE_PATTERN = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?\s*$", re.ASCII)
_DOUBLE_SPECIALS: Final[dict[str, float]] = {
    "INF": math.inf,
    "+INF": math.inf,
    "-INF": -math.inf,
    "NaN": math.nan,
}

ScalarValue = str | int | float


@dataclass(frozen=True)
class CoercedValue:
    """A value resolved to its storage family.

    ``fallback`` is set when the family differs from the natural family of
    the declared type, i.e. the value contradicted its declaration.
    """

    family: ValueFamily
    value: ScalarValue
    fallback: bool = False


@dataclass(frozen=True)
class RangeValues:
    """Reconciled endpoints of a Range, sharing a single family."""

    family: ValueFamily
    min: ScalarValue | None
    max: ScalarValue | None


def natural_family(declared: DataTypeDefXsd | None) -> ValueFamily:
    """Storage family a declared type maps to (string when undeclared)."""
    if declared is None:
        return ValueFamily.STRING
    return DATA_TYPE_FAMILIES.get(declared, ValueFamily.STRING)


def parse_int(raw: str) -> int | None:
    """Parse a signed 64-bit integer, or None when ``raw`` is not one."""
    if not _INTEGER_PATTERN.match(raw):
        return None
    value = int(raw)
    if value < INT64_MIN or value > INT64_MAX:
        return None
    return value


def parse_double(raw: str) -> float | None:
    """Parse a double in decimal/exponent notation or an XSD special value."""
    stripped = raw.strip()
    if stripped in _DOUBLE_SPECIALS:
        return _DOUBLE_SPECIALS[stripped]
    if not _DOUBLE_PATTERN.match(raw):
        return None
    value = float(stripped)
    if math.isinf(value):
        return None
    return value


def _parse_as(raw: str, family: ValueFamily) -> ScalarValue | None:
    if family is ValueFamily.INTEGER:
        return parse_int(raw)
    if family is ValueFamily.DOUBLE:
        return parse_double(raw)
    return raw


def coerce(raw: str | None, declared: DataTypeDefXsd | None) -> CoercedValue | None:
    """Resolve ``raw`` to a storage family.

    Returns None for an empty or absent value. Otherwise the value is parsed
    under the natural family of ``declared``; if that fails, integer, double
    and string are tried in turn and the result is marked as a fallback.
    """
    if not raw:
        return None

    family = natural_family(declared)
    value = _parse_as(raw, family)
    if value is not None:
        return CoercedValue(family, value)

    as_int = parse_int(raw)
    if as_int is not None:
        return CoercedValue(ValueFamily.INTEGER, as_int, fallback=True)

    as_double = parse_double(raw)
    if as_double is not None:
        return CoercedValue(ValueFamily.DOUBLE, as_double, fallback=True)

    return CoercedValue(ValueFamily.STRING, raw, fallback=True)


def format_scalar(value: ScalarValue) -> str:
    """Text form of a coerced value; integral doubles print without ``.0``."""
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "INF" if value > 0 else "-INF"
        if value.is_integer() and abs(value) < 1e16:
            return str(int(value))
        return repr(value)
    return str(value)


def reconcile_range(
    low: CoercedValue | None,
    high: CoercedValue | None,
) -> RangeValues | None:
    """Bring two independently coerced Range endpoints into one family.

    - neither present: None (no value records)
    - one present: that endpoint's family
    - same family: kept
    - integer and double: both become doubles
    - any string involved: both are re-expressed as text
    """
    if low is None and high is None:
        return None
    if high is None:
        return RangeValues(low.family, low.value, None)
    if low is None:
        return RangeValues(high.family, None, high.value)
    if low.family is high.family:
        return RangeValues(low.family, low.value, high.value)

    if ValueFamily.STRING not in (low.family, high.family):
        return RangeValues(ValueFamily.DOUBLE, float(low.value), float(high.value))

    return RangeValues(
        ValueFamily.STRING,
        low.value if low.family is ValueFamily.STRING else format_scalar(low.value),
        high.value if high.family is ValueFamily.STRING else format_scalar(high.value),
    )


def coerce_range(
    low: str | None,
    high: str | None,
    declared: DataTypeDefXsd | None,
) -> RangeValues | None:
    """Coerce both endpoints of a Range and reconcile them."""
    return reconcile_range(coerce(low, declared), coerce(high, declared))
