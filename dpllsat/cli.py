"""
Command line front end: dpllsat <DIMACS file>
Prints timings, then SATISFIABLE or UNSATISFIABLE as the last line.
"""
import argparse
import logging
import sys
import time

from .dimacs import read_dimacs
from .exceptions import DIMACSError
from .solver import CONSTANTS, SolverStatistics


def build_parser():
    parser = argparse.ArgumentParser(prog="dpllsat", description="DPLL SAT solver for DIMACS CNF files")
    parser.add_argument("file", help="path to a DIMACS CNF file")
    parser.add_argument("--stats", action="store_true", help="print solver statistics before the result")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="log more (-v for INFO, -vv for DEBUG)")
    return parser


def log_level(verbosity):
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return CONSTANTS.DEFAULT_LOG_LEVEL


def print_statistics(statistics: SolverStatistics):
    print("## Statistics: ")
    print("# Nodes: ", statistics.nodes)
    print("# Decisions: ", statistics.decisions)
    print("# Propagations: ", statistics.propagations)
    print("# Pure eliminations: ", statistics.pure_eliminations)
    print("# Max depth: ", statistics.max_depth)


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=log_level(args.verbose), format=CONSTANTS.LOG_FORMAT)

    start_time = time.perf_counter()
    try:
        formula = read_dimacs(args.file)
    except (DIMACSError, OSError) as error:
        print("error: {}".format(error), file=sys.stderr)
        return 1
    parse_ms = (time.perf_counter() - start_time) * 1000
    print("Parse time: {:.0f}ms".format(parse_ms))

    statistics = SolverStatistics()
    start_time = time.perf_counter()
    is_sat = formula.is_satisfiable(statistics)
    solve_ms = (time.perf_counter() - start_time) * 1000
    print("Elapsed time: {:.0f}ms".format(solve_ms))

    if args.stats:
        print_statistics(statistics)
    print("SATISFIABLE" if is_sat else "UNSATISFIABLE")
    return 0


if __name__ == "__main__":
    sys.exit(main())
