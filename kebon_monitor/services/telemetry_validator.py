"""Sanitization of untrusted numeric telemetry fields."""

import math
from numbers import Real
from typing import Any, Dict, Mapping

import structlog

from ..models import field_defaults_for


logger = structlog.get_logger(__name__)


def sanitize_numeric(value: Any, default: float) -> Any:
    """Return value if it is a finite number, otherwise the default.

    Numeric strings are parsed to float. Booleans count as non-numeric.
    """
    if isinstance(value, bool) or value is None:
        return default

    if isinstance(value, Real):
        try:
            return value if math.isfinite(value) else default
        except OverflowError:
            # ints too large for a float
            return default

    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return default
        return parsed if math.isfinite(parsed) else default

    return default


def validate_fields(sensor_type: str, raw_fields: Mapping[str, Any]) -> Dict[str, Any]:
    """Normalize the class-specific numeric fields of a payload.

    Fields outside the class catalogue, and every field of pump or
    dynamic classes, pass through verbatim.
    """
    validated = dict(raw_fields)

    for name, default in field_defaults_for(sensor_type).items():
        raw_value = raw_fields.get(name)
        clean_value = sanitize_numeric(raw_value, default)
        if raw_value is not None and clean_value is not raw_value:
            logger.debug("Telemetry field normalized",
                         sensor_type=sensor_type,
                         field=name,
                         raw_value=repr(raw_value),
                         value=clean_value)
        validated[name] = clean_value

    return validated


__all__ = ["sanitize_numeric", "validate_fields"]
