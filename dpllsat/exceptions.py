"""
Exception classes for reading DIMACS CNF input.

The solver itself never raises: every formula is either satisfiable or not.
Only turning text into a formula can fail, and it fails in one of the ways below.
I/O problems are not wrapped and reach the caller as the underlying OSError.
"""


class DIMACSError(Exception):
    """Base exception class for all DIMACS parsing errors."""
    def __init__(self, message="Invalid DIMACS input", line=None):
        self.message = message
        self.line = line
        super().__init__(self.message)

    def __str__(self):
        if self.line is None:
            return self.message
        return f"{self.message}: {self.line!r}"


class InvalidSpecificationLine(DIMACSError):
    """
    Raised when the `p cnf <variables> <clauses>` line is missing, repeated or malformed,
    including a variable count that is not a non-negative integer.
    """
    def __init__(self, line=None, message="Invalid specification line"):
        super().__init__(message, line)


class UnexpectedEntry(DIMACSError):
    """
    Raised for a line that is neither a comment, the specification line nor valid
    clause data (e.g. a token that is not an integer).
    """
    def __init__(self, line=None, message="Unexpected entry"):
        super().__init__(message, line)
