# server.py
"""""
Flask evaluation service.

Endpoints
---------
POST /api/calculate   {"expression": "2 + 3"}                  -> {"result": 5}
POST /api/plot        {"expression", "xRange": [a, b], "step"} -> {"points": [{"x", "y"}, ...]}
GET  /api/health                                               -> {"status": "UP"}

Bad input answers 400 with {"error", "details", "code"}.
"""""

import logging

from flask import Flask, jsonify, request
from flask_cors import CORS

from . import MathEngine
from . import config_manager as config_manager
from . import error as E

logger = logging.getLogger(__name__)


def create_app(settings=None):
    if settings is None:
        settings = config_manager.load_setting_value("all")
    max_plot_points = settings.get("max_plot_points", 2000)

    app = Flask(__name__)
    CORS(app)

    @app.route("/api/calculate", methods=["POST"])
    def calculate():
        data = request.get_json(silent=True) or {}
        expression = data.get("expression")
        logger.info(f'[Request] Expression: "{expression}"')

        if not isinstance(expression, str) or not expression.strip():
            return jsonify({"error": E.ERROR_MESSAGES["1000"], "code": "1000"}), 400

        try:
            result = MathEngine.calculate(expression)
        except E.CalculatorError as e:
            logger.error(f"[Error] {e.message}")
            return jsonify({"error": "Invalid Expression", "details": e.message, "code": e.code}), 400

        logger.info(f"[Success] Result: {result}")
        return jsonify({"result": result})

    @app.route("/api/plot", methods=["POST"])
    def plot():
        data = request.get_json(silent=True) or {}
        expression = data.get("expression")
        x_range = data.get("xRange")
        step = data.get("step", 0.2)

        if not isinstance(expression, str) or not expression.strip() or not x_range:
            return jsonify({"error": "Invalid request"}), 400

        try:
            points = MathEngine.sample(expression, x_range, step, max_plot_points)
        except E.CalculatorError as e:
            logger.error(f"[Error] Plot {expression!r}: {e.message}")
            return jsonify({"error": "Plot error", "details": e.message, "code": e.code}), 400

        return jsonify({"points": points})

    @app.route("/api/health", methods=["GET"])
    def health():
        return jsonify({"status": "UP", "service": "Calculator API"})

    return app


def run(settings=None):
    if settings is None:
        settings = config_manager.load_setting_value("all")
    app = create_app(settings)
    port = int(settings.get("server_port", 3000))
    logger.info(f"Server is running at http://localhost:{port}")
    app.run(host="0.0.0.0", port=port, debug=False)
