import unittest

from WebCalculator import error as E
from WebCalculator.EvaluationClient import EvaluationClient, Failure, LocalTransport, Success
from WebCalculator.HistoryLedger import HistoryEntry
from WebCalculator.Session import CalculatorSession


class ScriptedTransport:
    """Answers from a dict; expressions it does not know are rejected."""

    def __init__(self, answers=None, raises=None):
        self.answers = answers or {}
        self.raises = raises
        self.calls = []

    def calculate(self, expression):
        self.calls.append(expression)
        if self.raises is not None:
            raise self.raises
        if expression not in self.answers:
            raise E.MalformedExpression(f"Unexpected expression {expression}", code="2000")
        return self.answers[expression]


def press_all(session, keys):
    for key in keys:
        session.press(key)


class TestCalculatorSession(unittest.TestCase):
    def make_session(self, **kwargs):
        self.transport = ScriptedTransport(**kwargs)
        return CalculatorSession(EvaluationClient(self.transport))

    def test_successful_evaluation_records_history(self):
        session = self.make_session(answers={"2 + 3": 5})
        press_all(session, ["2", "+", "3"])
        outcome = session.press("=")

        self.assertEqual(outcome, Success(5))
        self.assertEqual(self.transport.calls, ["2 + 3"])
        entries = session.ledger.entries()
        self.assertEqual(len(entries), 1)
        self.assertEqual((entries[0].expression, entries[0].result), ("2 + 3", 5))
        self.assertTrue(session.builder.pending_reset)
        self.assertEqual(session.display(), ("5", ""))

    def test_unbalanced_group_is_closed_before_sending(self):
        session = self.make_session(answers={"sin(30)": -0.9880316240928618})
        press_all(session, ["sin(", "3", "0"])
        outcome = session.evaluate()
        self.assertIsInstance(outcome, Success)
        self.assertEqual(self.transport.calls, ["sin(30)"])

    def test_empty_builder_sends_nothing(self):
        session = self.make_session()
        self.assertIsNone(session.evaluate())
        self.assertEqual(self.transport.calls, [])
        self.assertEqual(len(session.ledger), 0)

    def test_failure_shows_error_and_keeps_history(self):
        session = self.make_session(answers={"1 + 1": 2})
        press_all(session, ["1", "+", "1", "="])
        press_all(session, ["5", "/", "/", "2"])
        outcome = session.evaluate()

        self.assertIsInstance(outcome, Failure)
        self.assertEqual(self.transport.calls[-1], "5 / / 2")
        self.assertEqual(session.builder.current_token, "Error")
        self.assertEqual(session.display(), ("Error", ""))
        self.assertEqual(len(session.ledger), 1)

    def test_transport_failure_shows_error(self):
        session = self.make_session(raises=E.TransportFailure("Connection refused", code="3000"))
        press_all(session, ["7", "*", "6"])
        outcome = session.evaluate()
        self.assertEqual(outcome, Failure("Connection refused", "3000"))
        self.assertEqual(session.builder.current_token, "Error")
        self.assertEqual(len(session.ledger), 0)

    def test_clear_history(self):
        session = self.make_session(answers={"1 + 1": 2, "2 + 2": 4})
        press_all(session, ["1", "+", "1", "="])
        press_all(session, ["2", "+", "2", "="])
        session.clear_history()
        self.assertEqual(session.ledger.entries(), ())

    def test_result_continues_into_next_expression(self):
        session = self.make_session(answers={"2 + 3": 5, "5 * 2": 10})
        press_all(session, ["2", "+", "3", "=", "*", "2", "="])
        self.assertEqual(session.builder.current_token, "10")
        self.assertEqual([e.expression for e in session.ledger], ["5 * 2", "2 + 3"])

    def test_stale_outcome_is_dropped_when_builder_changed(self):
        session = self.make_session()
        press_all(session, ["4", "+", "4"])
        ticket = session.begin_evaluation()
        session.press("1")

        applied = session.finish_evaluation(ticket, Success(8))
        self.assertFalse(applied)
        self.assertEqual(session.builder.current_expression_text(), "4 + 41")
        self.assertEqual(len(session.ledger), 0)

    def test_only_newest_ticket_applies(self):
        session = self.make_session()
        press_all(session, ["4", "+", "4"])
        first = session.begin_evaluation()
        second = session.begin_evaluation()

        self.assertFalse(session.finish_evaluation(first, Success(8)))
        self.assertTrue(session.finish_evaluation(second, Success(8)))
        self.assertEqual(len(session.ledger), 1)

    def test_replay_puts_result_on_display(self):
        session = self.make_session()
        session.replay(HistoryEntry("1000 + 234", 1234, None))
        self.assertEqual(session.display(), ("1,234", ""))
        press_all(session, ["+", "1"])
        self.assertEqual(session.builder.current_expression_text(), "1234 + 1")

    def test_clear_and_delete_keys(self):
        session = self.make_session()
        press_all(session, ["1", "2", "Backspace"])
        self.assertEqual(session.builder.current_token, "1")
        session.press("Escape")
        self.assertEqual(session.display(), ("0", ""))

    def test_cosmetic_operator_keys(self):
        session = self.make_session(answers={"6 * 3 / 2": 9})
        press_all(session, ["6", "×", "3", "÷", "2"])
        self.assertEqual(session.evaluate(), Success(9))
        self.assertEqual(session.ledger.entries()[0].expression, "6 × 3 ÷ 2")

    def test_unknown_key_raises(self):
        session = self.make_session()
        with self.assertRaises(E.InvalidInput):
            session.press("%")

    def test_load_expression(self):
        session = self.make_session(answers={"(2 + 3) * 4": 20})
        session.load_expression("(2 + 3) * 4")
        self.assertEqual(session.evaluate(), Success(20))

    def test_local_transport_end_to_end(self):
        session = CalculatorSession(EvaluationClient(LocalTransport()))
        press_all(session, ["1", "0", "/", "4", "="])
        self.assertEqual(session.display(), ("2.5", ""))
        self.assertEqual(session.ledger.entries()[0].result, 2.5)


if __name__ == "__main__":
    unittest.main()
