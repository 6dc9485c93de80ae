"""
Exception hierarchy for the carbonate equilibrium engine.

Every error raised by the engine derives from CarbonateChemistryError and
also from the builtin exception a caller would naturally catch:

- InvalidValueError  (ValueError)   - negative or non-finite concentration/pressure
- InvalidRangeError  (ValueError)   - pH outside [0, 14]
- MissingInputError  (TypeError)    - required argument is None
- ConvergenceError   (RuntimeError) - fixed-point solve failed

Errors are raised where they are detected and propagate unchanged to the
caller of the formula or constructor.
"""


class CarbonateChemistryError(Exception):
    """Base class for carbonate equilibrium errors"""


class InvalidValueError(CarbonateChemistryError, ValueError):
    """A concentration or partial pressure is negative or not a number"""


class InvalidRangeError(CarbonateChemistryError, ValueError):
    """A pH value lies outside [0, 14]"""


class MissingInputError(CarbonateChemistryError, TypeError):
    """A required argument was not supplied"""


class ConvergenceError(CarbonateChemistryError, RuntimeError):
    """
    The iterative solver could not produce an answer.

    Raised when the update hits a zero or negative divisor, produces a
    non-finite iterate, or exhausts its iteration budget.
    """

    def __init__(self, message: str, iterations: int = 0, last_error: float = float("nan")):
        super().__init__(message)
        self.iterations = iterations
        self.last_error = last_error
