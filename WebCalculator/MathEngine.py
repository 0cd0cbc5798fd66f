# MathEngine.py
"""""
Server-side evaluation engine for the calculator.

The arithmetic itself is done by SymPy; this module only
1) cleans the raw string (cosmetic symbols, auto-closed parentheses),
2) validates it against a whitelist of characters and names,
3) hands it to sympy.parse_expr and converts the result to a JSON friendly
   number (or string for complex values),
4) samples an expression in x for the plot endpoint.

Angles are in radians.
"""""

import logging
import math
import re
from tokenize import TokenError

import sympy as sp
from sympy.parsing.sympy_parser import convert_xor
from sympy.parsing.sympy_parser import implicit_multiplication
from sympy.parsing.sympy_parser import parse_expr
from sympy.parsing.sympy_parser import standard_transformations

from . import error as E
from .EvaluationClient import balance_parentheses
from .EvaluationClient import normalize_expression

logger = logging.getLogger(__name__)

MAX_INPUT_LENGTH = 1000
MAX_RESULT_DIGITS = 4000  # exact powers beyond this are refused
PLOT_VARIABLE = "x"

TRANSFORMATIONS = standard_transformations + (convert_xor, implicit_multiplication)

# Names the engine understands; everything else is rejected before parsing
NAMESPACE = {
    "sin": sp.sin,
    "cos": sp.cos,
    "tan": sp.tan,
    "asin": sp.asin,
    "acos": sp.acos,
    "atan": sp.atan,
    "sqrt": sp.sqrt,
    "log": sp.log,
    "ln": sp.log,
    "exp": sp.exp,
    "abs": sp.Abs,
    "pi": sp.pi,
    "e": sp.E,
}

_ALLOWED_CHARS = re.compile(r"^[\d\s+\-*/^().,a-zA-Z]*$")
_IDENTIFIER = re.compile(r"[A-Za-z]+")


def validate(expression, allowed_names):
    if len(expression) > MAX_INPUT_LENGTH:
        raise E.MalformedExpression("Expression too long", code="2000", equation=expression)
    if not _ALLOWED_CHARS.fullmatch(expression):
        raise E.MalformedExpression("Invalid characters in expression", code="2001", equation=expression)
    if "//" in expression.replace(" ", ""):
        # Python floor division is not part of the calculator language
        raise E.MalformedExpression("Unexpected operator '/'", code="2000", equation=expression)

    for name in _IDENTIFIER.findall(expression):
        # Exponent notation (1e5) is tokenized as a number by the parser
        if name not in allowed_names and not re.fullmatch(r"[eE]", name):
            raise E.MalformedExpression(name, code="2004", equation=expression)


def _parse(expression, local_dict):
    try:
        parsed = parse_expr(
            expression, local_dict=local_dict, transformations=TRANSFORMATIONS, evaluate=False)
    except (SyntaxError, TypeError, ValueError, AttributeError, TokenError) as e:
        raise E.MalformedExpression(str(e) or "Syntax error", code="2000", equation=expression)
    return _evaluate(parsed, expression)


def _check_power(base, exponent, expression):
    """Refuse exact powers whose result would have more than MAX_RESULT_DIGITS digits."""
    if not (base.is_Rational and exponent.is_Rational):
        return
    magnitude = max(abs(base.p), abs(base.q))
    if magnitude <= 1:
        return
    if abs(exponent) * sp.Float(math.log10(magnitude)) > MAX_RESULT_DIGITS:
        raise E.MalformedExpression("Number too big", code="2003", equation=expression)


def _evaluate(expr, expression):
    """Evaluate an unevaluated parse tree bottom-up, checking every power first."""
    if not isinstance(expr, sp.Basic) or not expr.args:
        return expr
    args = [_evaluate(arg, expression) for arg in expr.args]
    if expr.is_Pow:
        _check_power(args[0], args[1], expression)
    return expr.func(*args)


def _plain_number(value):
    """Return an int for integral floats (as a JS number would print), else the float."""
    if value.is_integer() and abs(value) < 2 ** 53:
        return int(value)
    return value


def to_result(expr, expression=None):
    """Convert a SymPy value into an int, float or complex-number string."""
    if not isinstance(expr, sp.Basic):
        raise E.MalformedExpression("Expected a single value", code="2000", equation=expression)
    if expr.has(sp.zoo, sp.nan):
        raise E.MalformedExpression("Division by zero", code="2002", equation=expression)
    if expr.free_symbols:
        names = ", ".join(sorted(str(s) for s in expr.free_symbols))
        raise E.MalformedExpression(names, code="2004", equation=expression)

    # Larger integers go through float like any other number
    if expr.is_Integer and abs(expr) < 2 ** 53:
        return int(expr)

    value = sp.N(expr)
    if value.has(sp.oo, -sp.oo, sp.zoo, sp.nan):
        raise E.MalformedExpression(str(value), code="2003", equation=expression)

    real, imag = value.as_real_imag()
    real, imag = float(real), float(imag)
    if not math.isfinite(real) or not math.isfinite(imag):
        raise E.MalformedExpression(str(value), code="2003", equation=expression)

    if imag == 0:
        return _plain_number(real)

    # Complex results travel as text, e.g. '2i' or '1 - 3i'
    imag_text = f"{_plain_number(abs(imag))}i"
    if real == 0:
        return f"-{imag_text}" if imag < 0 else imag_text
    sign = "-" if imag < 0 else "+"
    return f"{_plain_number(real)} {sign} {imag_text}"


def clean(expression):
    """Same repair the client applies, repeated for callers that skip it."""
    normalized = normalize_expression(expression)
    cleaned = balance_parentheses(normalized)
    if cleaned != normalized:
        logger.info(f'[Auto-Fix] Closing parens: "{cleaned}"')
    return cleaned


def calculate(expression):
    """Main API: clean → validate → parse with SymPy → numeric result."""
    if not expression or not expression.strip():
        raise E.InputEmpty("Expression is required", code="1000", equation=expression)

    cleaned = clean(expression)
    try:
        validate(cleaned, NAMESPACE)
        result = to_result(_parse(cleaned, NAMESPACE), cleaned)

    # Re-raise our domain errors after attaching the source equation
    except E.CalculatorError as e:
        e.equation = expression
        raise e
    except (OverflowError, RecursionError, MemoryError) as e:
        raise E.MalformedExpression(f"Number too large: {e}", code="2003", equation=expression)

    logger.debug(f"[Engine] {cleaned} -> {result}")
    return result


def sample(expression, x_range, step, max_points=2000):
    """Evaluate `expression` in x from x_range[0] to x_range[1].

    Points where the function is undefined (log of a negative, division by
    zero, complex values) are left out.
    """
    try:
        x_min, x_max = float(x_range[0]), float(x_range[1])
        step = float(step)
    except (TypeError, ValueError, IndexError) as e:
        raise E.MalformedExpression(f"Invalid plot range: {e}", code="2000", equation=expression)
    if step <= 0 or x_max < x_min or not all(map(math.isfinite, (x_min, x_max, step))):
        raise E.MalformedExpression("Invalid plot range", code="2000", equation=expression)
    if not math.isfinite((x_max - x_min) / step):
        raise E.MalformedExpression("Too many plot points", code="2000", equation=expression)

    cleaned = clean(expression)
    x = sp.Symbol(PLOT_VARIABLE)
    local_dict = dict(NAMESPACE, **{PLOT_VARIABLE: x})
    validate(cleaned, local_dict)
    function = sp.lambdify(x, _parse(cleaned, local_dict), modules=["math"])

    points = []
    count = int(math.floor((x_max - x_min) / step + 1e-9)) + 1
    for i in range(min(count, max_points)):
        x_value = round(x_min + i * step, 10)
        try:
            y_value = float(function(x_value))
        except (ValueError, ZeroDivisionError, OverflowError, TypeError):
            continue
        if math.isfinite(y_value):
            points.append({"x": x_value, "y": y_value})
    return points
