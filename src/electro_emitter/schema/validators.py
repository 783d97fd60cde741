"""
Validator synthesis.

Builds one predicate per property from its ConstraintSet. The predicate runs
natively in Python (returns True or raises AttributeValidationError) and
renders to an equivalent JavaScript arrow function in the generated source.

Checks run in a fixed order and the first failing one wins:

1. string min length     5. integer
2. string max length     6. finite number
3. number min value      7. pattern
4. number max value      8. date-time format

Each check only looks at values of its own runtime type, so a value of the
wrong type is left to the storage library. Enum membership is never checked
here: enum attributes are encoded as native value lists.
"""

from __future__ import annotations

import json
import logging
import math
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .constraints import ConstraintSet
from .fragments import SourceFragment
from .serializer import number_text

logger = logging.getLogger(__name__)

STRING = "string"
NUMBER = "number"

_PLAIN_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_PLAIN_TIME = re.compile(r"[0-9]{2}:[0-9]{2}(:[0-9]{2})?(\.[0-9]+)?")

_PLAIN_DATE_JS = r"/^\d{4}-\d{2}-\d{2}$/"
_PLAIN_TIME_JS = r"/^\d{2}:\d{2}(:\d{2})?(\.\d+)?$/"
_ISO_DATE_PREFIX_JS = r"/^\d{4}-\d{2}-\d{2}/"

# JavaScript named groups: (?<name>...) and \k<name>
_JS_NAMED_GROUP = re.compile(r"\(\?<(?=[A-Za-z_])")
_JS_NAMED_BACKREF = re.compile(r"\\k<([A-Za-z_][A-Za-z0-9_]*)>")


class AttributeValidationError(ValueError):
    """Raised by a validator when a value violates a constraint."""


@dataclass(frozen=True)
class Check:
    """
    One ordered check of a validator.

    Attributes:
        guard: Runtime type the check applies to ("string" or "number")
        violated: Returns True when a value of the guarded type fails
        condition: JavaScript condition for the same failure, guard excluded
        message: Failure message
    """

    guard: str
    violated: Callable[[Any], bool]
    condition: str
    message: str

    def applies_to(self, value: Any) -> bool:
        if self.guard == STRING:
            return isinstance(value, str)
        return isinstance(value, int | float) and not isinstance(value, bool)

    def to_source(self) -> str:
        return (
            f'if (typeof value === "{self.guard}" && {self.condition}) '
            f"throw new Error({json.dumps(self.message, ensure_ascii=False)})"
        )


class Validator(SourceFragment):
    """
    Predicate attached to an attribute as ``validate``.

    Calling it returns True for an acceptable value and raises
    AttributeValidationError carrying the first failed check's message
    otherwise.
    """

    def __init__(self, property_name: str, checks: list[Check]):
        self.property_name = property_name
        self.checks = tuple(checks)

    def __call__(self, value: Any) -> bool:
        for check in self.checks:
            if check.applies_to(value) and check.violated(value):
                raise AttributeValidationError(check.message)
        return True

    def to_source(self) -> str:
        body = "; ".join(check.to_source() for check in self.checks)
        return f"(value) => {{ {body}; return true; }}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Validator):
            return NotImplemented
        return (self.property_name, self.to_source()) == (other.property_name, other.to_source())

    def __hash__(self) -> int:
        return hash((self.property_name, self.to_source()))

    def __repr__(self) -> str:
        return f"Validator({self.property_name!r}, {len(self.checks)} checks)"


def _is_not_integral(value: int | float) -> bool:
    if isinstance(value, int):
        return False
    return not value.is_integer()


def _is_not_date_time(value: str) -> bool:
    """
    Python side of the date-time check.

    Both sides require an ISO ``YYYY-MM-DD`` prefix before parsing. Past that
    prefix, ``datetime.fromisoformat`` is somewhat stricter than the ``Date``
    parser of a JavaScript engine, so a few exotic suffixes accepted by the
    generated code are rejected here.
    """
    if _PLAIN_DATE.match(value) is None:
        return True
    try:
        datetime.fromisoformat(value)
    except ValueError:
        return True
    return False


def _date_time_check(kind: str, label: str) -> Check | None:
    if kind in ("utcDateTime", "offsetDateTime"):
        flavour = "UTC" if kind == "utcDateTime" else "offset"
        return Check(
            STRING,
            _is_not_date_time,
            f"(!{_ISO_DATE_PREFIX_JS}.test(value) || isNaN(new Date(value).getTime()))",
            f"{label} must be a valid {flavour} date-time string",
        )
    if kind == "plainDate":
        return Check(
            STRING,
            lambda v: _PLAIN_DATE.fullmatch(v) is None,
            f"!{_PLAIN_DATE_JS}.test(value)",
            f"{label} must be a valid date (YYYY-MM-DD)",
        )
    if kind == "plainTime":
        return Check(
            STRING,
            lambda v: _PLAIN_TIME.fullmatch(v) is None,
            f"!{_PLAIN_TIME_JS}.test(value)",
            f"{label} must be a valid time (HH:MM:SS)",
        )
    return None


def python_pattern(pattern: str) -> str:
    """Rewrite JavaScript named groups and back-references in Python syntax."""
    pattern = _JS_NAMED_GROUP.sub("(?P<", pattern)
    return _JS_NAMED_BACKREF.sub(r"(?P=\1)", pattern)


def _pattern_check(pattern: str, label: str, property_name: str) -> Check:
    """
    Pattern check; the pattern is a JavaScript regular expression.

    The generated code always tests it. When Python cannot compile it even
    after rewriting named groups, only the generated code enforces it.
    """
    compiled: re.Pattern[str] | None
    try:
        compiled = re.compile(python_pattern(pattern))
    except re.error as e:
        logger.warning(
            "Pattern %r of %s is not checked in Python: %s", pattern, property_name, e
        )
        compiled = None

    def violated(value: str) -> bool:
        return compiled is not None and compiled.search(value) is None

    return Check(
        STRING,
        violated,
        f"!new RegExp({json.dumps(pattern, ensure_ascii=False)}).test(value)",
        f"{label} must match pattern {pattern}",
    )


def synthesize_validator(constraints: ConstraintSet, property_name: str) -> Validator | None:
    """
    Build the validator for a property.

    Args:
        constraints: Resolved constraints of the property
        property_name: Name used in failure messages

    Returns:
        Validator, or None when no constraint applies
    """
    label = f"'{property_name}'"
    checks: list[Check] = []

    if constraints.min_length is not None:
        n = constraints.min_length
        checks.append(
            Check(
                STRING,
                lambda v: len(v) < n,
                f"value.length < {n}",
                f"{label} must be at least {n} characters",
            )
        )
    if constraints.max_length is not None:
        m = constraints.max_length
        checks.append(
            Check(
                STRING,
                lambda v: len(v) > m,
                f"value.length > {m}",
                f"{label} must be at most {m} characters",
            )
        )

    if constraints.min_value is not None:
        low = constraints.min_value
        checks.append(
            Check(
                NUMBER,
                lambda v: v < low,
                f"value < {number_text(low)}",
                f"{label} must be at least {number_text(low)}",
            )
        )
    if constraints.max_value is not None:
        high = constraints.max_value
        checks.append(
            Check(
                NUMBER,
                lambda v: v > high,
                f"value > {number_text(high)}",
                f"{label} must be at most {number_text(high)}",
            )
        )

    if constraints.is_integer:
        checks.append(
            Check(
                NUMBER,
                _is_not_integral,
                "!Number.isInteger(value)",
                f"{label} must be an integer",
            )
        )

    if constraints.is_float:
        checks.append(
            Check(
                NUMBER,
                lambda v: not math.isfinite(v),
                "!Number.isFinite(value)",
                f"{label} must be a finite number",
            )
        )

    if constraints.pattern:
        checks.append(_pattern_check(constraints.pattern, label, property_name))

    if constraints.is_date_time and constraints.date_time_kind:
        check = _date_time_check(constraints.date_time_kind, label)
        if check:
            checks.append(check)

    if not checks:
        return None

    logger.debug("Synthesized %d checks for %s", len(checks), property_name)
    return Validator(property_name, checks)
