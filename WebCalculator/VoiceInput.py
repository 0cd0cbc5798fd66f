# VoiceInput.py
"""""
Turns a speech-to-text transcript into a plain expression string.

Speech recognition itself is done elsewhere (browser / OS); this module only
rewrites words:
    'two plus three'                -> '2 + 3'
    'sine of thirty'                -> 'sin(30'
    'twelve point five times four'  -> '12.5 * 4'

The result is handed to ExpressionBuilder.load_expression().
"""""

import re

_units = {
    "zero": 0, "one": 1, "two": 2, "three": 3, "four": 4, "five": 5, "six": 6, "seven": 7,
    "eight": 8, "nine": 9, "ten": 10, "eleven": 11, "twelve": 12, "thirteen": 13,
    "fourteen": 14, "fifteen": 15, "sixteen": 16, "seventeen": 17, "eighteen": 18,
    "nineteen": 19, "twenty": 20, "thirty": 30, "forty": 40, "fifty": 50, "sixty": 60,
    "seventy": 70, "eighty": 80, "ninety": 90,
}
_scales = {"hundred": 100, "thousand": 1_000, "million": 1_000_000, "billion": 1_000_000_000}

# Order matters: longer phrases first
_replacements = [
    (r"\b(open|left)\s+(?:bracket|parenthesis|paren)\b", "("),
    (r"\b(close|right)\s+(?:bracket|parenthesis|paren)\b", ")"),

    (r"\bsquare\s+root\s+of\b", "sqrt("),
    (r"\b(sine|sin)(\s+of)?\b", "sin("),
    (r"\b(cosine|cos)(\s+of)?\b", "cos("),
    (r"\b(tangent|tan)(\s+of)?\b", "tan("),
    (r"\b(natural\s+log|ln)(\s+of)?\b", "ln("),
    (r"\b(logarithm|log)(\s+of)?\b", "log("),

    (r"\b(to\s+the\s+power\s+of|raised\s+to|power\s+of)\b", "^"),
    (r"\bsquared\b", "^ 2"),
    (r"\bcubed\b", "^ 3"),

    (r"\bplus\b", "+"),
    (r"\bminus\b", "-"),
    (r"\b(times|multiplied\s+by|x)\b", "*"),
    (r"\b(divided\s+by|over)\b", "/"),
]


def words_to_number(text):
    """Replace runs of number words by digits: 'one hundred and five' -> '105'."""
    tokens = re.split(r"(\s+)", text.lower().replace("-", " "))
    out = []
    total = 0
    current = 0
    in_number = False
    negative = False
    decimals = None

    def flush():
        nonlocal total, current, in_number, negative, decimals
        if not in_number:
            return
        value = str(total + current)
        if decimals:
            value += "." + "".join(decimals)
        if negative:
            value = "-" + value
        out.append(value)
        total, current, in_number, negative, decimals = 0, 0, False, False, None

    for tok in tokens:
        if not tok or tok.isspace():
            if not in_number:
                out.append(tok)
            continue

        if tok == "negative" and not in_number:
            in_number = negative = True
        elif tok == "and" and in_number and decimals is None:
            pass
        elif tok in ("point", "dot") and in_number and decimals is None:
            decimals = []
        elif decimals is not None and (tok in _units and _units[tok] < 10 or tok.isdigit()):
            decimals.append(str(_units.get(tok, tok)))
        elif tok in _units:
            current += _units[tok]
            in_number = True
        elif tok in _scales and in_number:
            if _scales[tok] == 100:
                current = (current or 1) * 100
            else:
                total += (current or 1) * _scales[tok]
                current = 0
        elif tok.isdigit() and not in_number:
            current = int(tok)
            in_number = True
        else:
            if in_number:
                flush()
                out.append(" ")
            out.append(tok)

    flush()
    return "".join(out).strip()


def transcript_to_expression(transcript):
    text = words_to_number(transcript)
    for pattern, replacement in _replacements:
        text = re.sub(pattern, replacement, text)
    # 'sin( 30' -> 'sin(30'
    text = re.sub(r"\(\s+", "(", text)
    return re.sub(r"\s+", " ", text).strip()


def apply_transcript(builder, transcript):
    """Reset the builder and load the spoken expression into it."""
    return builder.load_expression(transcript_to_expression(transcript))
