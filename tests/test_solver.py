"""
Unit tests for the bounded fixed-point solver.
"""

import math
from pathlib import Path
import sys

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.exceptions import ConvergenceError
from core.solver import (
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_TOLERANCE,
    SolverOptions,
    solve_fixed_point,
)


class TestSolverOptions:
    """Test solver option validation"""

    def test_defaults(self):
        options = SolverOptions()
        assert options.tolerance == DEFAULT_TOLERANCE == 1e-6
        assert options.max_iterations == DEFAULT_MAX_ITERATIONS == 10_000

    def test_non_positive_tolerance(self):
        with pytest.raises(ValueError, match="tolerance"):
            SolverOptions(tolerance=0.0)

    def test_zero_iterations(self):
        with pytest.raises(ValueError, match="max_iterations"):
            SolverOptions(max_iterations=0)


class TestSolveFixedPoint:
    """Test fixed-point iteration"""

    def test_babylonian_square_root(self):
        """x -> (x + 2/x)/2 converges to sqrt(2)"""
        solution = solve_fixed_point(lambda x: 0.5 * (x + 2.0 / x), seed=1.0)
        assert solution.value == pytest.approx(math.sqrt(2.0), abs=1e-6)
        assert solution.error <= DEFAULT_TOLERANCE
        assert solution.iterations < 10

    def test_previous_is_last_input(self):
        solution = solve_fixed_point(lambda x: 0.5 * x, seed=1.0, options=SolverOptions(tolerance=1e-3))
        assert solution.value == pytest.approx(0.5 * solution.previous)
        assert abs(solution.value - solution.previous) == pytest.approx(solution.error)

    def test_immediate_fixed_point(self):
        solution = solve_fixed_point(lambda x: x, seed=3.0)
        assert solution.iterations == 1
        assert solution.value == 3.0
        assert solution.error == 0.0

    def test_iteration_cap_raises(self):
        """A diverging update stops at the cap instead of looping forever"""
        with pytest.raises(ConvergenceError, match="did not converge within 5 iterations") as exc_info:
            solve_fixed_point(lambda x: x + 1.0, seed=0.0, options=SolverOptions(max_iterations=5))

        assert exc_info.value.iterations == 5
        assert exc_info.value.last_error == pytest.approx(1.0)

    def test_non_finite_iterate_raises(self):
        with pytest.raises(ConvergenceError, match="non-finite"):
            solve_fixed_point(lambda x: math.inf, seed=1.0)

    def test_update_errors_propagate(self):
        def update(x):
            raise ConvergenceError("zero divisor")

        with pytest.raises(ConvergenceError, match="zero divisor"):
            solve_fixed_point(update, seed=1.0)
