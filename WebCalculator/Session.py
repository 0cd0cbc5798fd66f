# Session.py
"""""
One calculator session: a builder, a history ledger and an evaluation client.

A session replaces the global UI state of a single-page calculator. Each
window (or test) owns its own session, so nothing is shared between them.

Evaluation happens in two halves so the UI can run the network call on a worker
thread:
    ticket = session.begin_evaluation()          # UI thread
    outcome = session.client.evaluate(ticket.expression)   # worker thread
    session.finish_evaluation(ticket, outcome)   # UI thread again

A ticket only applies if it is the newest one and the builder has not changed
since it was issued; anything else is a stale answer and gets dropped.
"""""

import logging
from collections import namedtuple

from .DisplayProjector import project
from .DisplayProjector import result_to_text
from .EvaluationClient import Success
from .ExpressionBuilder import DIGITS
from .ExpressionBuilder import OPERATORS
from .ExpressionBuilder import POINT
from .ExpressionBuilder import ExpressionBuilder
from .HistoryLedger import HistoryLedger
from . import error as E

logger = logging.getLogger(__name__)

EvaluationTicket = namedtuple("EvaluationTicket", ["request_id", "revision", "expression"])

CLEAR_KEYS = ["C", "AC", "Escape"]
DELETE_KEYS = ["DEL", "<", "Backspace"]
EVALUATE_KEYS = ["=", "Enter", "Return"]


class CalculatorSession:

    def __init__(self, client, builder=None, ledger=None):
        self.client = client
        self.builder = builder if builder is not None else ExpressionBuilder()
        self.ledger = ledger if ledger is not None else HistoryLedger()
        self._request_id = 0

    # --- Evaluation ---

    def begin_evaluation(self):
        """Return a ticket for the current expression, or None if it is blank."""
        expression = self.builder.current_expression_text().strip()
        if not expression:
            logger.debug("[Skip] Empty expression, nothing sent")
            return None
        self._request_id += 1
        return EvaluationTicket(self._request_id, self.builder.revision, expression)

    def finish_evaluation(self, ticket, outcome):
        """Apply an outcome to builder and history. Returns False if it was stale."""
        if ticket.request_id != self._request_id or ticket.revision != self.builder.revision:
            logger.info(f"[Stale] Dropping outcome of request {ticket.request_id} for {ticket.expression!r}")
            return False

        if isinstance(outcome, Success):
            self.ledger.record(ticket.expression, outcome.result)
            self.builder.show_result(result_to_text(outcome.result))
        else:
            logger.warning(f"[Error] {ticket.expression!r}: {outcome.message}")
            self.builder.show_error()
        return True

    def evaluate(self):
        """Synchronous evaluation; None if the expression was blank."""
        ticket = self.begin_evaluation()
        if ticket is None:
            return None
        outcome = self.client.evaluate(ticket.expression)
        self.finish_evaluation(ticket, outcome)
        return outcome

    # --- Input ---

    def press(self, key):
        """Dispatch one button / key label to the matching transition."""
        if key in EVALUATE_KEYS:
            return self.evaluate()
        if key in CLEAR_KEYS:
            self.builder.reset()
        elif key in DELETE_KEYS:
            self.builder.delete_last()
        elif len(key) == 1 and (key in DIGITS or key == POINT):
            self.builder.append_digit_or_point(key)
        elif key in OPERATORS:
            self.builder.append_operator(key)
        elif key.endswith("(") and key[:-1].isidentifier():
            self.builder.append_function(key)
        else:
            raise E.InvalidInput(key, code="4000")
        return None

    def load_expression(self, text):
        return self.builder.load_expression(text)

    # --- History ---

    def replay(self, entry):
        """Put a history entry's result back on the display, as if just computed."""
        return self.builder.show_result(result_to_text(entry.result))

    def clear_history(self):
        self.ledger.clear()

    # --- Display ---

    def display(self):
        return project(self.builder.state)
