# EvaluationClient.py
"""""
Sends an assembled expression to the evaluator and turns every possible
answer into an EvaluationOutcome:

- Success(result)         result exactly as the engine returned it
- Failure(message, code)  human readable message plus the error code

Transports
----------
- HttpTransport:  POST <server_url>/api/calculate via requests (default)
- LocalTransport: calls MathEngine in process with the same deadline (offline mode, tests)

evaluate() never raises; callers only ever look at the outcome.
"""""

import logging
from collections import namedtuple
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout

import requests

from . import error as E

logger = logging.getLogger(__name__)

COSMETIC_SYMBOLS = {"×": "*", "÷": "/", "−": "-"}

Success = namedtuple("Success", ["result"])
Failure = namedtuple("Failure", ["message", "code"])


def normalize_expression(expression):
    for symbol, operator in COSMETIC_SYMBOLS.items():
        expression = expression.replace(symbol, operator)
    return expression.strip()


def balance_parentheses(expression):
    open_parens = expression.count("(")
    close_parens = expression.count(")")
    if open_parens > close_parens:
        expression += ")" * (open_parens - close_parens)
    return expression


def prepare_expression(expression):
    return balance_parentheses(normalize_expression(expression))


class LocalTransport:
    """Evaluate in this process with MathEngine (needs SymPy, no server).

    Each call runs on a small thread pool so a slow evaluation is abandoned
    after `timeout` seconds, the same deadline HttpTransport gets.
    """

    def __init__(self, max_plot_points=2000, timeout=5):
        self.max_plot_points = max_plot_points
        self.timeout = timeout
        self._executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="calc")

    def _run(self, function, expression, *args):
        future = self._executor.submit(function, expression, *args)
        try:
            return future.result(timeout=self.timeout)
        except FutureTimeout:
            future.cancel()
            raise E.TransportFailure(
                f"Evaluation took longer than {self.timeout}s", code="3001", equation=expression)

    def calculate(self, expression):
        from . import MathEngine
        return self._run(MathEngine.calculate, expression)

    def plot(self, expression, x_range, step):
        from . import MathEngine
        return self._run(MathEngine.sample, expression, x_range, step, self.max_plot_points)


class HttpTransport:
    """Talk to the Flask evaluation service (see server.py)."""

    def __init__(self, base_url, timeout=5):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _post(self, path, payload):
        url = self.base_url + path
        try:
            response = requests.post(url, json=payload, timeout=self.timeout)
        except requests.Timeout as e:
            raise E.TransportFailure(str(e), code="3001", equation=payload.get("expression"))
        except requests.RequestException as e:
            raise E.TransportFailure(str(e), code="3000", equation=payload.get("expression"))

        try:
            data = response.json()
        except ValueError:
            raise E.TransportFailure(
                f"HTTP {response.status_code} without JSON body",
                code="3003",
                equation=payload.get("expression"),
            )

        if response.status_code >= 500:
            raise E.TransportFailure(
                data.get("error", f"HTTP {response.status_code}"),
                code="3002",
                equation=payload.get("expression"),
            )
        if response.status_code >= 400:
            # Bad input: the service explains what the engine rejected
            raise E.MalformedExpression(
                data.get("details") or data.get("error", "Invalid Expression"),
                code=data.get("code", "2000"),
                equation=payload.get("expression"),
            )
        return data

    def calculate(self, expression):
        data = self._post("/api/calculate", {"expression": expression})
        if "result" not in data:
            raise E.TransportFailure("Response without result", code="3003", equation=expression)
        return data["result"]

    def plot(self, expression, x_range, step):
        data = self._post("/api/plot", {"expression": expression, "xRange": list(x_range), "step": step})
        if "points" not in data:
            raise E.TransportFailure("Response without points", code="3003", equation=expression)
        return data["points"]


class EvaluationClient:

    def __init__(self, transport):
        self.transport = transport

    @classmethod
    def from_settings(cls, settings):
        transport = settings.get("transport", "http")
        if transport == "local":
            return cls(LocalTransport(
                settings.get("max_plot_points", 2000), settings.get("request_timeout", 5)))
        if transport == "http":
            return cls(HttpTransport(settings["server_url"], settings.get("request_timeout", 5)))
        raise E.ConfigurationError(f"Unknown transport {transport!r}", code="5000")

    def evaluate(self, expression_text):
        if not expression_text or not expression_text.strip():
            return Failure(E.ERROR_MESSAGES["1000"], "1000")

        expression = prepare_expression(expression_text)
        logger.info(f'[Request] Expression: "{expression}"')

        try:
            result = self.transport.calculate(expression)

        except E.CalculatorError as e:
            logger.warning(f"[Error] {e.code} {e.message}")
            return Failure(e.message, e.code)

        except Exception as e:
            # Anything unexpected from a transport still ends as a Failure
            logger.exception(f"[Error] Unexpected failure for {expression!r}")
            return Failure(str(e), "9999")

        logger.info(f"[Success] Result: {result}")
        return Success(result)

    def plot(self, expression, x_range=(-20, 20), step=0.2):
        """Return the sampled points; raises CalculatorError on failure."""
        return self.transport.plot(prepare_expression(expression), x_range, step)
