# Main.py
""""" Entry point for the calculator.

   Responsibilities:
   - Verify required files exist
   - Load configuration and set up logging
   - Start either the Qt GUI or the Flask evaluation service

"""""
import sys
import logging
import argparse
from pathlib import Path

from WebCalculator import config_manager as config_manager
from WebCalculator import error as E


PROJECT_ROOT = Path(__file__).resolve().parent


def check_files_exist():

    """
      Fail fast if required files are missing / moved / renamed.
    """

    package_dir = PROJECT_ROOT / "WebCalculator"

    REQUIRED = [
        package_dir / "UI.py",
        package_dir / "server.py",
        package_dir / "MathEngine.py",
        package_dir / "config_manager.py",
        PROJECT_ROOT / "config.json",
        PROJECT_ROOT / "ui_strings.json",
    ]

    missing_files = [file_path.name for file_path in REQUIRED if not file_path.exists()]

    if missing_files:
        print("Error: The following files are missing or in the wrong location:")
        for file_name in missing_files:
            print(f"- {file_name}")
        sys.exit(1)


def setup_logging(level_name):
    logging.basicConfig(
        level=getattr(logging, str(level_name).upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def plot(expression, x_range, step, settings):
    """Sample an expression through the configured transport and print the points."""
    from WebCalculator.EvaluationClient import EvaluationClient

    client = EvaluationClient.from_settings(settings)
    try:
        points = client.plot(expression, x_range=x_range, step=step)
    except E.CalculatorError as e:
        print(E.describe(e), file=sys.stderr)
        return 1

    for point in points:
        print(f"{point['x']}\t{point['y']}")
    return 0


def main(argv=None):

    """
    Load configuration and start the requested part.
    - Keep this thin: no business logic here.
    """

    parser = argparse.ArgumentParser(description="Calculator with a SymPy evaluation service")
    parser.add_argument("--server", action="store_true", help="run the evaluation service instead of the GUI")
    parser.add_argument("--port", type=int, help="override server_port from config.json")
    parser.add_argument("--plot", metavar="EXPRESSION", help="print x, y samples of an expression in x and exit")
    parser.add_argument("--range", nargs=2, type=float, default=[-20, 20], metavar=("MIN", "MAX"),
                        help="x range for --plot")
    parser.add_argument("--step", type=float, default=0.2, help="x step for --plot")
    args = parser.parse_args(argv)

    all_settings = config_manager.load_setting_value("all")
    if args.port:
        all_settings["server_port"] = args.port
    setup_logging(all_settings["log_level"])
    logging.getLogger(__name__).info(f"Config loaded: {all_settings}")

    try:
        if args.plot:
            return plot(args.plot, args.range, args.step, all_settings)
        if args.server:
            from WebCalculator import server
            server.run(all_settings)
        else:
            # The UI owns the event loop from here on
            from WebCalculator import UI
            UI.main()
    except E.ConfigurationError as e:
        logging.getLogger(__name__).error(E.describe(e) + f" ({e.message})")
        sys.exit(1)


if __name__ == "__main__":
    check_files_exist()
    sys.exit(main())
