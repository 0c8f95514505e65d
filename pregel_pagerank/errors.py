# errors.py
#
# Project: Pregel PageRank Engine
# Author:  Haozhe Jia <jimmyjia@bu.edu>
# Course:  CS528 Cloud Computing, Boston University, Spring 2026
#
# Description:
#   Exception taxonomy.  Every fatal condition is raised while loading the
#   graph or validating the configuration, before any superstep runs.
#   NonConvergence is only raised on request: hitting the iteration cap is
#   a valid terminal state for the engine.


class PageRankError(Exception):
    """Base class for all errors raised by this package."""


class MalformedInput(PageRankError, ValueError):
    """An adjacency record could not be parsed."""

    def __init__(self, line_no, line, reason):
        self.line_no = line_no
        self.line = line
        self.reason = reason
        super().__init__(f"line {line_no}: {reason}: {line!r}")


class DanglingReference(PageRankError, LookupError):
    """An edge names a vertex that was never declared."""

    def __init__(self, source, target):
        self.source = source
        self.target = target
        super().__init__(f"edge {source!r} -> {target!r} names an undeclared vertex")


class InputUnavailable(PageRankError, OSError):
    """The graph source could not be located or downloaded."""


class ConfigurationError(PageRankError, ValueError):
    """A configuration option is out of range."""


class NonConvergence(PageRankError):
    """The iteration cap was reached before the tolerance was met."""

    def __init__(self, method, iterations, aggregate=None):
        self.method = method
        self.iterations = iterations
        self.aggregate = aggregate
        detail = f" (last L1 change {aggregate:.3e})" if aggregate is not None else ""
        super().__init__(f"{method} did not converge within {iterations} iterations{detail}")
