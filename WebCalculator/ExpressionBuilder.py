# ExpressionBuilder.py
"""""
Expression-assembly state machine for the calculator front end.

The builder keeps two buffers:
- committed_expression: tokens that are already finished (numbers followed by
  operators / function openings), joined by single spaces
- current_token: the number that is still being typed

Every user action (digit, operator, function, delete, clear) is one method.
The builder performs no I/O; evaluation and display live elsewhere.
"""""

from collections import namedtuple

from . import error as E

DIGITS = "0123456789"
POINT = "."

# Binary operators are committed with one space on each side
BINARY_OPERATORS = ["+", "-", "*", "/", "^", "×", "÷", "−"]
UNARY_MINUS = ["-", "−"]
OPEN_GROUP = "("
CLOSE_GROUP = ")"
OPERATORS = BINARY_OPERATORS + [OPEN_GROUP, CLOSE_GROUP]

ERROR_TOKEN = "Error"


BuilderState = namedtuple(
    "BuilderState",
    ["committed_expression", "current_token", "pending_reset", "revision"],
)


class ExpressionBuilder:

    def __init__(self):
        self.committed_expression = ""
        self.current_token = ""
        self.pending_reset = False
        self.revision = 0  # Bumped on every state change

    @property
    def state(self):
        return BuilderState(
            self.committed_expression,
            self.current_token,
            self.pending_reset,
            self.revision,
        )

    def _touch(self):
        self.revision += 1
        return self.state

    def current_expression_text(self):
        return self.committed_expression + self.current_token

    # --- Transitions ---

    def reset(self):
        self.committed_expression = ""
        self.current_token = ""
        self.pending_reset = False
        return self._touch()

    def delete_last(self):
        """Remove the last character of the token being typed.

        Right after an evaluation the shown result is dropped instead, so the
        next input starts clean. Never edits committed_expression.
        """
        if self.pending_reset:
            self.current_token = ""
            self.pending_reset = False
        elif self.current_token:
            self.current_token = self.current_token[:-1]
        else:
            return self.state
        return self._touch()

    def append_digit_or_point(self, ch):
        if len(ch) != 1 or (ch not in DIGITS and ch != POINT):
            raise E.InvalidInput(ch, code="4000")

        if self.pending_reset:
            self.committed_expression = ""
            self.current_token = ch
            self.pending_reset = False
        elif ch == POINT and POINT in self.current_token:
            return self.state
        else:
            self.current_token += ch
        return self._touch()

    def append_operator(self, op):
        """Commit the current token and append an operator or grouping mark.

        After an evaluation the previous result seeds the new expression, so
        '= +' continues from the answer. A binary operator cannot open an
        expression; only unary minus and '(' can.
        """
        if op not in OPERATORS:
            raise E.InvalidInput(op, code="4000")

        seeded = False
        if self.pending_reset:
            seed = "" if self.current_token == ERROR_TOKEN else self.current_token
            self.committed_expression = ""
            self.current_token = seed
            self.pending_reset = False
            seeded = True

        starting = not self.committed_expression and not self.current_token
        if starting and op not in UNARY_MINUS and op != OPEN_GROUP:
            # Rejected; an error token dropped above still counts as a change
            return self._touch() if seeded else self.state

        # Minus with nothing to its left is a sign: -5, (-5, 2 * -5
        unary = op in UNARY_MINUS and not self.current_token and (
            starting or self.committed_expression.endswith((OPEN_GROUP, " ")))

        if op == OPEN_GROUP:
            if self.current_token:
                # 5( reads as 5 * (
                self.committed_expression += self.current_token + " * "
            self.committed_expression += OPEN_GROUP
        elif op == CLOSE_GROUP:
            self.committed_expression += self.current_token + CLOSE_GROUP
        elif unary:
            self.committed_expression += op
        elif not self.current_token and self.committed_expression.endswith(" "):
            # Operator right after operator keeps single spacing: 5 / / 2
            self.committed_expression += op + " "
        else:
            self.committed_expression += self.current_token + " " + op + " "

        self.current_token = ""
        return self._touch()

    def append_function(self, name):
        if name.endswith(OPEN_GROUP):
            name = name[:-1]
        if not name.isidentifier():
            raise E.InvalidInput(name, code="4001")

        if self.pending_reset:
            self.committed_expression = ""
            self.current_token = ""
            self.pending_reset = False

        if self.current_token:
            # Implicit multiplication: 5 sin( becomes 5 * sin(
            self.committed_expression += self.current_token + " * "
        self.committed_expression += name + OPEN_GROUP
        self.current_token = ""
        return self._touch()

    # --- Evaluation outcomes ---

    def show_result(self, result_text):
        self.committed_expression = ""
        self.current_token = result_text
        self.pending_reset = True
        return self._touch()

    def show_error(self):
        return self.show_result(ERROR_TOKEN)

    # --- Bulk input ---

    def load_expression(self, text):
        """Reset, then feed a plain expression string through the transitions.

        Used for voice transcripts and pasted text. The builder is only
        updated if the whole string is accepted.
        """
        scratch = ExpressionBuilder()
        i = 0
        while i < len(text):
            ch = text[i]
            if ch.isspace():
                i += 1
            elif ch in DIGITS or ch == POINT:
                scratch.append_digit_or_point(ch)
                i += 1
            elif ch in OPERATORS:
                scratch.append_operator(ch)
                i += 1
            elif ch.isalpha():
                j = i
                while j < len(text) and (text[j].isalnum() or text[j] == "_"):
                    j += 1
                name = text[i:j]
                if j >= len(text) or text[j] != OPEN_GROUP:
                    raise E.InvalidInput(name, code="4001")
                scratch.append_function(name)
                i = j + 1
            else:
                raise E.InvalidInput(ch, code="4000")

        self.committed_expression = scratch.committed_expression
        self.current_token = scratch.current_token
        self.pending_reset = False
        return self._touch()
