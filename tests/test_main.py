import io
import os
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import patch

import main


class TestPlotCommand(unittest.TestCase):
    def run_main(self, argv):
        out, err = io.StringIO(), io.StringIO()
        with patch.dict(os.environ, {"WEBCALC_TRANSPORT": "local"}), redirect_stdout(out), redirect_stderr(err):
            code = main.main(argv)
        return code, out.getvalue(), err.getvalue()

    def test_prints_samples(self):
        code, out, _ = self.run_main(["--plot", "x^2", "--range", "0", "2", "--step", "1"])
        self.assertEqual(code, 0)
        self.assertEqual(out.splitlines(), ["0.0\t0.0", "1.0\t1.0", "2.0\t4.0"])

    def test_reports_invalid_expression(self):
        code, out, err = self.run_main(["--plot", "x +", "--range", "0", "1"])
        self.assertEqual(code, 1)
        self.assertEqual(out, "")
        self.assertIn("Error 2000: Invalid Expression", err)


if __name__ == "__main__":
    unittest.main()
