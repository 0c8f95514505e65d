# config.py
#
# Project: Pregel PageRank Engine
# Author:  Haozhe Jia <jimmyjia@bu.edu>
# Course:  CS528 Cloud Computing, Boston University, Spring 2026
#
# Description:
#   Run configuration shared by every compute model.  Values are checked
#   when the object is built so a bad option is rejected before the graph
#   is touched.
#
#   Options:
#     damping              - probability of following an out-edge, in (0, 1)
#     max_iterations       - superstep / iteration cap, positive integer
#     tolerance            - global L1 change that ends the run early;
#                            0 disables the early halt
#     per_vertex_tolerance - |delta| below which a vertex votes to halt;
#                            0 disables voting; votes never end the run
#     num_workers          - worker threads per superstep (engine only)

import math
from dataclasses import dataclass, asdict

from pregel_pagerank.errors import ConfigurationError

DEFAULT_DAMPING = 0.85
DEFAULT_MAX_ITERATIONS = 100
DEFAULT_TOLERANCE = 1.0e-9


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


def _is_real(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


@dataclass(frozen=True)
class PageRankConfig:
    damping: float = DEFAULT_DAMPING
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    tolerance: float = DEFAULT_TOLERANCE
    per_vertex_tolerance: float = 0.0
    num_workers: int = 1

    def __post_init__(self):
        if not _is_real(self.damping) or not 0.0 < self.damping < 1.0:
            raise ConfigurationError(f"damping must be in (0, 1), got {self.damping!r}")
        if not _is_int(self.max_iterations) or self.max_iterations <= 0:
            raise ConfigurationError(f"max_iterations must be a positive integer, got {self.max_iterations!r}")
        if not _is_real(self.tolerance) or self.tolerance < 0:
            raise ConfigurationError(f"tolerance must be a non-negative real, got {self.tolerance!r}")
        if not _is_real(self.per_vertex_tolerance) or self.per_vertex_tolerance < 0:
            raise ConfigurationError(
                f"per_vertex_tolerance must be a non-negative real, got {self.per_vertex_tolerance!r}")
        if not _is_int(self.num_workers) or self.num_workers <= 0:
            raise ConfigurationError(f"num_workers must be a positive integer, got {self.num_workers!r}")

    @classmethod
    def from_args(cls, args):
        """Build a config from an argparse namespace produced by main.py."""
        return cls(
            damping=args.damping,
            max_iterations=args.max_iterations,
            tolerance=args.tolerance,
            per_vertex_tolerance=args.per_vertex_tolerance,
            num_workers=args.workers,
        )

    def as_dict(self):
        return asdict(self)
