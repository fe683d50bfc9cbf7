"""Number, percentage and duration formatting for report tables."""

import math

VALUE_SIG_FIGS = 3


def render_number(value: float | int) -> str:
    """Integers get thousands separators; floats get at least one decimal and three significant figures."""
    if isinstance(value, int) or (isinstance(value, float) and value.is_integer()):
        return f"{int(value):,}"
    if not math.isfinite(value):
        return str(value)

    abs_value = abs(value)
    if abs_value >= 1:
        digits = math.floor(math.log10(abs_value)) + 1
        decimals = max(1, VALUE_SIG_FIGS - digits)
    else:
        exponent = math.floor(math.log10(abs_value))
        decimals = -exponent + VALUE_SIG_FIGS - 1
    return f"{value:,.{decimals}f}"


def render_percentage(value: float) -> str:
    return f"{value:,.{VALUE_SIG_FIGS - 2}%}"


def render_duration(seconds: float) -> str:
    """Render in µs below a millisecond, ms below a second, s otherwise."""
    if seconds == 0:
        return "0s"
    precision = 1
    abs_seconds = abs(seconds)
    if abs_seconds < 1e-3:
        value = seconds * 1_000_000
        unit = "µs"
        if abs(value) >= 1:
            precision = 0
    elif abs_seconds < 1:
        value = seconds * 1_000
        unit = "ms"
    else:
        value = seconds
        unit = "s"
    return f"{value:,.{precision}f}{unit}"
