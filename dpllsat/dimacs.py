"""
Description: DIMACS CNF reader and writer

    c a comment
    p cnf <variables> <clauses>
    1 -2 0
    2 3 0

Every 0 terminates a clause, so a clause may span lines and a line may hold
several clauses.
"""

import logging

from .exceptions import InvalidSpecificationLine, UnexpectedEntry
from .solver import CNF, CONSTANTS, Clause, Variable

logger = logging.getLogger(__name__)


def parse_specification_line(line: str):
    # Returns (variable count, clause count or None)
    tokens = line.split()
    if (len(tokens) < 3 or len(tokens) > 4
            or tokens[0] != CONSTANTS.SPECIFICATION_PREFIX or tokens[1] != CONSTANTS.FORMAT_NAME):
        raise InvalidSpecificationLine(line)
    try:
        var_count = int(tokens[2])
        clause_count = int(tokens[3]) if len(tokens) == 4 else None
    except ValueError:
        raise InvalidSpecificationLine(line) from None
    if var_count < 0 or (clause_count is not None and clause_count < 0):
        raise InvalidSpecificationLine(line)
    return var_count, clause_count


def parse_clause_tokens(line: str):
    try:
        return [int(token) for token in line.split()]
    except ValueError:
        raise UnexpectedEntry(line) from None


def read_lines(lines) -> CNF:
    var_count = None
    clause_count = None
    clauses = []
    current_clause = []
    for raw_line in lines:
        line = raw_line.strip()
        # Skip blank lines and comments
        if not line or line.startswith(CONSTANTS.COMMENT_PREFIX):
            continue
        # SATLIB trailer, nothing after it is clause data
        if line.startswith(CONSTANTS.TRAILER_PREFIX):
            break
        if line.startswith(CONSTANTS.SPECIFICATION_PREFIX):
            if var_count is not None:
                raise InvalidSpecificationLine(line, "Duplicate specification line")
            var_count, clause_count = parse_specification_line(line)
            continue
        if var_count is None:
            raise UnexpectedEntry(line, "Clause data before specification line")

        for literal in parse_clause_tokens(line):
            if literal == CONSTANTS.CLAUSE_TERMINATOR:
                clauses.append(Clause(current_clause))
                current_clause = []
            else:
                if abs(literal) > var_count:
                    logger.warning("Literal %d exceeds declared variable count %d", literal, var_count)
                current_clause.append(Variable.from_dimacs(literal))

    if var_count is None:
        raise InvalidSpecificationLine(message="Missing specification line")
    # Unterminated final clause
    if current_clause:
        clauses.append(Clause(current_clause))
    if clause_count is not None and clause_count != len(clauses):
        logger.warning("Specification declares %d clauses, read %d", clause_count, len(clauses))
    logger.info("Read formula with %d variables and %d clauses", var_count, len(clauses))
    return CNF(var_count, clauses)


def parse_dimacs(text: str) -> CNF:
    """Parse DIMACS CNF text held in memory."""
    return read_lines(text.splitlines())


def read_dimacs(filepath) -> CNF:
    """Read a DIMACS CNF file. OSError propagates to the caller unchanged."""
    with open(filepath, encoding="utf-8") as input_file:
        try:
            return read_lines(input_file)
        except UnicodeDecodeError as error:
            raise UnexpectedEntry(message="Input is not UTF-8 text ({})".format(error.reason)) from error


def write_dimacs(formula: CNF, filepath):
    with open(filepath, "w", encoding="utf-8") as output_file:
        output_file.write(formula.as_dimacs())
        output_file.write("\n")
