


class CalculatorError(Exception):
    def __init__(self, message, code="9999", equation=None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.equation = equation

class InputEmpty(CalculatorError):
    pass

class MalformedExpression(CalculatorError):
    pass

class TransportFailure(CalculatorError):
    pass

class InvalidInput(CalculatorError):
    pass

class ConfigurationError(CalculatorError):
    pass




Error_Dictionary= {

    "1" : "Empty Input",
    "2" : "Malformed Expression",
    "3" : "Transport Failure",
    "4" : "Invalid Input",
    "5" : "Configuration Error",
    "9" : "Runtime Error"

}

#Error Messages are structured in:
# 1. Digit: Main Error
# 2.-4. Digit: Error Number



ERROR_MESSAGES = {
    "1000" : "Expression is required",

    "2000" : "Invalid Expression: ", # + engine details
    "2001" : "Invalid characters in expression",
    "2002" : "Division by zero",
    "2003" : "Result is not a number: ", # + Result
    "2004" : "Undefined symbol: ", # + Symbol

    "3000" : "Evaluation service unreachable",
    "3001" : "Evaluation service timed out",
    "3002" : "Evaluation service error",
    "3003" : "Malformed response from evaluation service",

    "4000" : "Unknown key: ", # + key
    "4001" : "Invalid function name: ", # + name

    "5000" : "Settings could not be loaded",

    "9999" : "Unexpected Error: " #+error
}


def describe(error):
    """Return the user facing 'Error <code>: <message>' line for an error."""
    base = ERROR_MESSAGES.get(error.code, ERROR_MESSAGES["9999"])
    if base.endswith(": "):
        return f"Error {error.code}: {base}{error.message}"
    return f"Error {error.code}: {base}"
