# DisplayProjector.py
"""""
Pure functions turning builder / history state into the strings shown on screen.

Nothing in here keeps state or touches Qt, so every function can be tested
without a rendered UI.
"""""

import math
import re

ERROR_TOKEN = "Error"
MAX_PLAIN_LENGTH = 12      # longer tokens switch to precision notation
SIGNIFICANT_DIGITS = 10

# Anything that is not a plain (optionally exponent) number is shown verbatim
_NUMBER_TEXT = re.compile(r"^[+-]?\d*\.?\d*(?:[eE][+-]?\d+)?$")
_PADDED_EXPONENT = re.compile(r"e([+-])0*(\d)")


def _trim_exponent(text):
    # Python pads exponents ('1e-07'), the display does not ('1e-7')
    return _PADDED_EXPONENT.sub(r"e\1\2", text)


def result_to_text(value):
    """Render an evaluation result the way the browser would print a number."""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return _trim_exponent(repr(value))
    return str(value)


def to_precision(value, digits=SIGNIFICANT_DIGITS):
    """Number.prototype.toPrecision: fixed notation unless the exponent is
    below -6 or at least `digits`."""
    if value == 0:
        return "0." + "0" * (digits - 1) if digits > 1 else "0"

    mantissa, exponent = f"{value:.{digits - 1}e}".split("e")
    exponent = int(exponent)
    if exponent < -6 or exponent >= digits:
        sign = "+" if exponent >= 0 else "-"
        return f"{mantissa}e{sign}{abs(exponent)}"
    return f"{value:.{digits - 1 - exponent}f}"


def format_number(value):
    text = value if isinstance(value, str) else result_to_text(value)
    if text == ERROR_TOKEN or not _NUMBER_TEXT.match(text):
        return text

    if len(text) > MAX_PLAIN_LENGTH:
        try:
            return to_precision(float(text))
        except ValueError:
            return text

    integer_part, point, fraction = text.partition(".")
    try:
        integer_value = float(integer_part)
        integer_display = f"{integer_value:,.0f}"
    except ValueError:
        integer_display = ""

    if point:
        return f"{integer_display}.{fraction}"
    return integer_display


def format_expression_line(committed_expression):
    return committed_expression


def project(state):
    """Return (main_line, working_line) for a BuilderState."""
    if state.current_token:
        main_line = format_number(state.current_token)
    else:
        main_line = "0"
    return main_line, format_expression_line(state.committed_expression)


def format_history(entries):
    return [(f"{entry.expression} =", format_number(entry.result)) for entry in entries]
