import math
import time
import unittest

from WebCalculator import MathEngine
from WebCalculator import error as E


class TestCalculate(unittest.TestCase):
    def test_integer_results_stay_integers(self):
        result = MathEngine.calculate("2 + 3")
        self.assertEqual(result, 5)
        self.assertIsInstance(result, int)

    def test_caret_is_power(self):
        self.assertEqual(MathEngine.calculate("2 ^ 10"), 1024)

    def test_division(self):
        self.assertEqual(MathEngine.calculate("10 / 4"), 2.5)

    def test_cosmetic_symbols(self):
        self.assertEqual(MathEngine.calculate("6 × 3 ÷ 2 − 1"), 8)

    def test_missing_parenthesis_is_closed(self):
        self.assertAlmostEqual(MathEngine.calculate("sin(30"), math.sin(30))

    def test_functions_and_constants(self):
        self.assertAlmostEqual(MathEngine.calculate("pi"), math.pi)
        self.assertEqual(MathEngine.calculate("sqrt(16)"), 4)
        self.assertEqual(MathEngine.calculate("ln(e)"), 1)

    def test_signs(self):
        self.assertEqual(MathEngine.calculate("-5"), -5)
        self.assertEqual(MathEngine.calculate("2 * -5"), -10)

    def test_complex_result_is_text(self):
        self.assertEqual(MathEngine.calculate("sqrt(-4)"), "2i")

    def test_double_operator_is_rejected(self):
        with self.assertRaises(E.MalformedExpression) as ctx:
            MathEngine.calculate("5 / / 2")
        self.assertEqual(ctx.exception.code, "2000")
        self.assertEqual(ctx.exception.equation, "5 / / 2")

    def test_trailing_operator_is_rejected(self):
        with self.assertRaises(E.MalformedExpression):
            MathEngine.calculate("2 +")

    def test_division_by_zero(self):
        with self.assertRaises(E.MalformedExpression) as ctx:
            MathEngine.calculate("1 / 0")
        self.assertEqual(ctx.exception.code, "2002")

    def test_unknown_function(self):
        with self.assertRaises(E.MalformedExpression) as ctx:
            MathEngine.calculate("foo(2)")
        self.assertEqual(ctx.exception.code, "2004")

    def test_free_variable(self):
        with self.assertRaises(E.MalformedExpression) as ctx:
            MathEngine.calculate("x + 1")
        self.assertEqual(ctx.exception.code, "2004")

    def test_invalid_characters(self):
        with self.assertRaises(E.MalformedExpression) as ctx:
            MathEngine.calculate("2 $ 3")
        self.assertEqual(ctx.exception.code, "2001")

    def test_blank_input(self):
        with self.assertRaises(E.InputEmpty):
            MathEngine.calculate("   ")

    def test_tower_of_powers_fails_fast(self):
        start = time.monotonic()
        with self.assertRaises(E.MalformedExpression) as ctx:
            MathEngine.calculate("9 ^ 9 ^ 9")
        self.assertEqual(ctx.exception.code, "2003")
        self.assertLess(time.monotonic() - start, 2)

    def test_huge_negative_power_is_refused(self):
        with self.assertRaises(E.MalformedExpression) as ctx:
            MathEngine.calculate("2 ^ -(10 ^ 6)")
        self.assertEqual(ctx.exception.code, "2003")

    def test_large_results_become_floats(self):
        self.assertEqual(MathEngine.calculate("2 ^ 100"), 2.0 ** 100)
        with self.assertRaises(E.MalformedExpression) as ctx:
            MathEngine.calculate("10 ^ 400")
        self.assertEqual(ctx.exception.code, "2003")

    def test_too_long(self):
        with self.assertRaises(E.MalformedExpression):
            MathEngine.calculate("1+" * 600 + "1")

    def test_to_result_rejects_containers(self):
        with self.assertRaises(E.MalformedExpression):
            MathEngine.to_result((1, 2))


class TestSample(unittest.TestCase):
    def test_polynomial(self):
        points = MathEngine.sample("x^2", (-2, 2), 1)
        self.assertEqual([p["x"] for p in points], [-2, -1, 0, 1, 2])
        self.assertEqual([p["y"] for p in points], [4, 1, 0, 1, 4])

    def test_undefined_points_are_skipped(self):
        points = MathEngine.sample("log(x)", (-2, 2), 1)
        self.assertEqual([p["x"] for p in points], [1, 2])

        points = MathEngine.sample("1 / x", (-1, 1), 1)
        self.assertEqual([p["x"] for p in points], [-1, 1])

    def test_fractional_step(self):
        points = MathEngine.sample("2 * x", (0, 1), 0.2)
        self.assertEqual(len(points), 6)
        self.assertAlmostEqual(points[-1]["y"], 2.0)

    def test_point_cap(self):
        points = MathEngine.sample("x", (-20, 20), 0.2, max_points=10)
        self.assertEqual(len(points), 10)

    def test_invalid_range(self):
        with self.assertRaises(E.MalformedExpression):
            MathEngine.sample("x", (-1, 1), 0)
        with self.assertRaises(E.MalformedExpression):
            MathEngine.sample("x", (1, -1), 0.5)
        with self.assertRaises(E.MalformedExpression):
            MathEngine.sample("x", "abc", 0.5)

    def test_non_finite_range(self):
        cases = [
            ((-1, 1), float("nan")),
            ((0, float("inf")), 1),
            ((float("-inf"), 0), 1),
            ((-1e308, 1e308), 1),
            ((-1e307, 1e307), 1e-308),
        ]
        for x_range, step in cases:
            with self.assertRaises(E.MalformedExpression):
                MathEngine.sample("x", x_range, step)

    def test_unknown_symbol(self):
        with self.assertRaises(E.MalformedExpression):
            MathEngine.sample("y + x", (0, 1), 1)


if __name__ == "__main__":
    unittest.main()
