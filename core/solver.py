"""
Bounded fixed-point solver.

Repeatedly applies an update relation x_{n+1} = f(x_n) from a seed until two
successive iterates differ by no more than the tolerance. The loop is capped;
exhausting the cap, or producing a non-finite iterate, raises ConvergenceError
instead of looping forever.

The update relation may itself raise ConvergenceError (for example on a zero
divisor); that error propagates unchanged.

Usage:
    >>> solution = solve_fixed_point(lambda x: 0.5 * (x + 2.0 / x), seed=1.0)
    >>> round(solution.value, 6)
    1.414214
"""

from dataclasses import dataclass
from typing import Callable, Optional
import logging
import math

from .exceptions import ConvergenceError

logger = logging.getLogger(__name__)


DEFAULT_TOLERANCE = 1e-6
DEFAULT_MAX_ITERATIONS = 10_000


@dataclass(frozen=True)
class SolverOptions:
    """
    Convergence controls for solve_fixed_point.

    Attributes:
        tolerance: Stop once |x_{n+1} - x_n| <= tolerance
        max_iterations: Upper bound on update evaluations
    """
    tolerance: float = DEFAULT_TOLERANCE
    max_iterations: int = DEFAULT_MAX_ITERATIONS

    def __post_init__(self):
        if not self.tolerance > 0:
            raise ValueError(f"tolerance must be positive (got {self.tolerance})")
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1 (got {self.max_iterations})")


@dataclass(frozen=True)
class FixedPointSolution:
    """
    Converged state of a fixed-point iteration.

    Attributes:
        value: Final iterate x_{n+1}
        previous: Iterate the final update was applied to (x_n)
        iterations: Number of update evaluations performed
        error: |value - previous| at termination
    """
    value: float
    previous: float
    iterations: int
    error: float


def solve_fixed_point(
    update: Callable[[float], float],
    seed: float,
    options: Optional[SolverOptions] = None,
    label: str = "fixed point",
) -> FixedPointSolution:
    """
    Iterate ``update`` from ``seed`` until successive iterates agree.

    Args:
        update: Relation mapping the current estimate to the next one
        seed: Initial estimate
        options: Tolerance and iteration cap (defaults to SolverOptions())
        label: Name used in log and error messages

    Returns:
        FixedPointSolution with the converged value and diagnostics

    Raises:
        ConvergenceError: If the iteration cap is reached, an iterate is not
            finite, or ``update`` itself reports a failure
    """
    options = options or SolverOptions()

    current = seed
    error = math.inf
    for iteration in range(1, options.max_iterations + 1):
        candidate = update(current)
        if not math.isfinite(candidate):
            logger.error(f"{label}: non-finite iterate after {iteration} iterations")
            raise ConvergenceError(
                f"{label} produced a non-finite iterate ({candidate}) at iteration {iteration}",
                iterations=iteration,
                last_error=error,
            )

        error = abs(candidate - current)
        if error <= options.tolerance:
            logger.debug(f"{label}: converged in {iteration} iterations (error={error:.3e})")
            return FixedPointSolution(
                value=candidate,
                previous=current,
                iterations=iteration,
                error=error,
            )
        current = candidate

    logger.error(
        f"{label}: no convergence within {options.max_iterations} iterations "
        f"(last error={error:.3e}, tolerance={options.tolerance:.1e})"
    )
    raise ConvergenceError(
        f"{label} did not converge within {options.max_iterations} iterations "
        f"(last error {error:.3e} > tolerance {options.tolerance:.1e})",
        iterations=options.max_iterations,
        last_error=error,
    )
