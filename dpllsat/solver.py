"""
Description: A DPLL based SAT solver
Decides satisfiability of a CNF formula using unit propagation,
pure literal elimination and branch-and-backtrack search.
"""

import enum, functools, logging
from sortedcontainers import SortedSet

logger = logging.getLogger(__name__)

class CONSTANTS:
    # DIMACS vocabulary, shared by the reader and the writer
    COMMENT_PREFIX = "c"
    SPECIFICATION_PREFIX = "p"
    FORMAT_NAME = "cnf"
    TRAILER_PREFIX = "%" # SATLIB files end with "%\n0\n"
    CLAUSE_TERMINATOR = 0
    # used by the command line front end
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    DEFAULT_LOG_LEVEL = logging.WARNING

class AssignmentResult(enum.Enum):
    A_REMOVED_VARIABLE = 0 # The inverse literal was struck out, clause still open
    A_CLAUSE_OBVIATED = 1 # Clause is satisfied, drop it from the formula
    A_CLAUSE_UNCHANGED = 2

class SolverState(enum.Enum):
    S_UNRESOLVED = 0
    S_SATISFIED = 1
    S_UNSATISFIED = 2

@functools.total_ordering
class Variable:
    """
    A boolean variable, either as a literal (x3) or as its negation (-x3).
    Variables are immutable values ordered by (number, is_negative).
    """
    __slots__ = ("_number", "_is_negative")

    def __init__(self, number: int, is_negative: bool = False):
        if number < 1:
            raise ValueError("Variable number must be a positive integer, is {}".format(number))
        self._number = number
        self._is_negative = bool(is_negative)

    @classmethod
    def from_dimacs(cls, literal: int) -> "Variable":
        return cls(abs(literal), literal < 0)

    @property
    def number(self) -> int:
        return self._number

    @property
    def is_negative(self) -> bool:
        return self._is_negative

    @property
    def inverse(self) -> "Variable":
        return Variable(self._number, not self._is_negative)

    def evaluate(self, value: bool) -> bool:
        return (not value) if self._is_negative else value

    def _key(self):
        return (self._number, self._is_negative)

    def __eq__(self, other):
        if not isinstance(other, Variable):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other):
        if not isinstance(other, Variable):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        return "Variable({})".format(self.as_dimacs())

    def as_dimacs(self) -> str:
        return "-{}".format(self._number) if self._is_negative else str(self._number)

class Clause:
    """
    A clause is the logical OR of its variables.
    Repeated literals fold into one, so variables live in a SortedSet. Sorting
    also fixes the iteration order, which the branching heuristic relies on.
    """
    def __init__(self, variables=()):
        self.variables = SortedSet(variables)

    @property
    def unit_term(self):
        # Only a clause with exactly one variable has a unit term
        if len(self.variables) != 1:
            return None
        return self.variables[0]

    @property
    def contains_conflict(self) -> bool:
        return any(var.inverse in self.variables for var in self.variables)

    @property
    def is_empty(self) -> bool:
        return not self.variables

    def __len__(self):
        return len(self.variables)

    def __iter__(self):
        return iter(self.variables)

    def __contains__(self, variable):
        return variable in self.variables

    def __eq__(self, other):
        if not isinstance(other, Clause):
            return NotImplemented
        return self.variables == other.variables

    __hash__ = None

    def __repr__(self):
        return "Clause([{}])".format(", ".join(var.as_dimacs() for var in self.variables))

    def copy(self) -> "Clause":
        return Clause(self.variables)

    """
    Assign the given variable TRUE and simplify the clause:
    1. The number does not occur here: nothing changes.
    2. The same literal occurs: the clause is satisfied and can go, except when it is
       the only literal. A unit clause stays so the unit term is still visible.
    3. The inverse occurs: that literal is now FALSE, strike it out since (false | x) == x.
    """
    def assign(self, variable: Variable) -> AssignmentResult:
        if variable in self.variables:
            if len(self.variables) == 1:
                return AssignmentResult.A_CLAUSE_UNCHANGED
            return AssignmentResult.A_CLAUSE_OBVIATED
        inverse = variable.inverse
        if inverse in self.variables:
            self.variables.remove(inverse)
            return AssignmentResult.A_REMOVED_VARIABLE
        return AssignmentResult.A_CLAUSE_UNCHANGED

    # Returns the simplified copy, or None if the assignment obviates the clause
    def assigning(self, variable: Variable):
        clause = self.copy()
        if clause.assign(variable) == AssignmentResult.A_CLAUSE_OBVIATED:
            return None
        return clause

    def eliminate(self, pure_variables):
        self.variables.difference_update(pure_variables)

    def eliminating(self, pure_variables) -> "Clause":
        clause = self.copy()
        clause.eliminate(pure_variables)
        return clause

    # assignment maps variable number -> bool, missing numbers count as FALSE literals
    def evaluate(self, assignment) -> bool:
        for var in self.variables:
            if var.number in assignment and var.evaluate(assignment[var.number]):
                return True
        return False

    def as_dimacs(self) -> str:
        tokens = [var.as_dimacs() for var in self.variables]
        tokens.append(str(CONSTANTS.CLAUSE_TERMINATOR))
        return " ".join(tokens)

class SolverStatistics:
    def __init__(self):
        self.nodes = 0 # search nodes visited, one per simplify-and-branch step
        self.decisions = 0
        self.propagations = 0 # unit literals assigned
        self.pure_eliminations = 0
        self.max_depth = 0

    def as_dict(self):
        return {
            "nodes": self.nodes,
            "decisions": self.decisions,
            "propagations": self.propagations,
            "pure_eliminations": self.pure_eliminations,
            "max_depth": self.max_depth,
        }

class CNF:
    """
    A formula in Conjunctive Normal Form, e.g. (x1 | x2) & (-x2 | x3) & -x3

    The formula is satisfiable if some assignment [x1: T|F, ..., xn: T|F] makes
    every clause true. Every search branch works on its own copy of the clauses,
    so a sibling branch never observes another branch's simplifications.
    """
    def __init__(self, number_of_variables: int, clauses=()):
        self.number_of_variables = number_of_variables
        self.clauses = [clause.copy() for clause in clauses]

    def __len__(self):
        return len(self.clauses)

    def __iter__(self):
        return iter(self.clauses)

    def __repr__(self):
        return "CNF(number_of_variables={}, clauses={})".format(self.number_of_variables, self.clauses)

    def copy(self) -> "CNF":
        return CNF(self.number_of_variables, self.clauses)

    # Assign the variable TRUE in every clause, dropping the clauses it satisfies
    def assign(self, variable: Variable):
        remaining = []
        for clause in self.clauses:
            if clause.assign(variable) != AssignmentResult.A_CLAUSE_OBVIATED:
                remaining.append(clause)
        self.clauses = remaining

    def assigning(self, variable: Variable) -> "CNF":
        formula = self.copy()
        formula.assign(variable)
        return formula

    """
    Unit propagation: a unit clause forces its variable TRUE, so assign it through the
    whole formula. Other clauses containing the variable are satisfied and removed, clauses
    containing its inverse lose that literal.
    The units are collected once on entry. Unit clauses exposed by this pass are
    picked up by the next search node, not here.
    Returns the number of unit literals assigned.
    """
    def unit_propagate(self) -> int:
        units = [clause.unit_term for clause in self.clauses if clause.unit_term is not None]
        for unit in units:
            self.assign(unit)
        return len(units)

    def unit_propagated(self) -> "CNF":
        formula = self.copy()
        formula.unit_propagate()
        return formula

    # True iff every clause is a unit clause and no two unit terms are inverses
    def is_trivially_consistent(self) -> bool:
        unit_terms = set()
        for clause in self.clauses:
            term = clause.unit_term
            if term is None:
                return False
            unit_terms.add(term)
        return not any(term.inverse in unit_terms for term in unit_terms)

    def pure_variables(self):
        all_variables = set()
        for clause in self.clauses:
            all_variables.update(clause.variables)
        return {var for var in all_variables if var.inverse not in all_variables}

    """
    Pure literal elimination: a pure variable never occurs with the other polarity, so
    giving it its own polarity satisfies every clause it occurs in. Those clauses lose
    their pure literals and are dropped. Clauses that were empty before the pass stay,
    they remain unsatisfiable.
    Returns the number of pure variables found.
    """
    def eliminate_pure_variables(self) -> int:
        pure = self.pure_variables()
        if not pure:
            return 0
        remaining = []
        for clause in self.clauses:
            size = len(clause)
            clause.eliminate(pure)
            if len(clause) == size:
                remaining.append(clause)
        self.clauses = remaining
        return len(pure)

    def eliminating_pure_variables(self) -> "CNF":
        formula = self.copy()
        formula.eliminate_pure_variables()
        return formula

    # First variable of the first clause, clauses iterate in ascending order
    def branching_variable(self):
        if not self.clauses or self.clauses[0].is_empty:
            return None
        return self.clauses[0].variables[0]

    def contains_empty_clause(self) -> bool:
        return any(clause.is_empty for clause in self.clauses)

    def evaluate(self, assignment) -> bool:
        return all(clause.evaluate(assignment) for clause in self.clauses)

    """
    One search node: simplify this (private) formula in place and report whether
    it is already decided. S_UNRESOLVED means the caller has to branch.
    """
    def simplify(self, statistics: SolverStatistics = None) -> SolverState:
        if not self.clauses:
            return SolverState.S_SATISFIED
        if self.is_trivially_consistent():
            return SolverState.S_SATISFIED
        if self.contains_empty_clause():
            return SolverState.S_UNSATISFIED

        propagated = self.unit_propagate()
        # An emptied clause had all of its literals forced FALSE by the units
        if self.contains_empty_clause() or any(clause.contains_conflict for clause in self.clauses):
            return SolverState.S_UNSATISFIED

        eliminated = self.eliminate_pure_variables()
        if statistics is not None:
            statistics.propagations += propagated
            statistics.pure_eliminations += eliminated
        if not self.clauses:
            return SolverState.S_SATISFIED
        return SolverState.S_UNRESOLVED

    """
    DPLL search. The stack holds (formula, depth) pairs, each formula a private copy.
    Pushing the FALSE branch before the TRUE branch explores v = TRUE first, the same
    order as solve(F | v) or solve(F | -v).
    """
    def run_dpll(self, statistics: SolverStatistics = None) -> SolverState:
        if statistics is None:
            statistics = SolverStatistics()
        stack = [(self.copy(), 0)]
        while stack:
            formula, depth = stack.pop()
            statistics.nodes += 1
            statistics.max_depth = max(statistics.max_depth, depth)

            state = formula.simplify(statistics)
            if state == SolverState.S_SATISFIED:
                return state
            if state == SolverState.S_UNSATISFIED:
                continue

            variable = formula.branching_variable()
            if variable is None:
                continue
            statistics.decisions += 1
            logger.debug("Branching on %s at depth %d", variable.as_dimacs(), depth)
            stack.append((formula.assigning(variable.inverse), depth + 1))
            # The TRUE branch reuses this node's copy, nothing else refers to it any more
            formula.assign(variable)
            stack.append((formula, depth + 1))
        return SolverState.S_UNSATISFIED

    def is_satisfiable(self, statistics: SolverStatistics = None) -> bool:
        result = self.run_dpll(statistics)
        logger.info("Formula with %d variables and %d clauses is %s",
            self.number_of_variables, len(self.clauses), result.name)
        return result == SolverState.S_SATISFIED

    def as_dimacs(self) -> str:
        lines = ["{} {} {} {}".format(CONSTANTS.SPECIFICATION_PREFIX, CONSTANTS.FORMAT_NAME,
            self.number_of_variables, len(self.clauses))]
        lines += [clause.as_dimacs() for clause in self.clauses]
        return "\n".join(lines)
