"""
Validation dataset registry and benchmark testing framework.

This module provides:
- Registry of carbonate speciation reference cases
- Automated benchmark testing against hand calculations
- Accuracy tracking and reporting
"""

from .carbonate_benchmarks import CarbonateBenchmarks, CarbonateTestCase
from .run_validation import run_all_validations, ValidationReport

__all__ = [
    "CarbonateBenchmarks",
    "CarbonateTestCase",
    "run_all_validations",
    "ValidationReport",
]
