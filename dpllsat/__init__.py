"""
A textbook DPLL SAT solver for CNF formulas in DIMACS format.
"""

from .dimacs import parse_dimacs, read_dimacs, write_dimacs
from .exceptions import DIMACSError, InvalidSpecificationLine, UnexpectedEntry
from .solver import AssignmentResult, CNF, Clause, SolverState, SolverStatistics, Variable

__version__ = "0.1.0"

__all__ = [
    "AssignmentResult",
    "CNF",
    "Clause",
    "DIMACSError",
    "InvalidSpecificationLine",
    "SolverState",
    "SolverStatistics",
    "UnexpectedEntry",
    "Variable",
    "parse_dimacs",
    "read_dimacs",
    "write_dimacs",
]
