# main.py
#
# Project: Pregel PageRank Engine
# Author:  Haozhe Jia <jimmyjia@bu.edu>
# Course:  CS528 Cloud Computing, Boston University, Spring 2026
#
# Description:
#   Entry point.  Loads an adjacency-list graph (local file or GCS object),
#   prints degree statistics, runs the selected PageRank models, and checks
#   every model against the reference solver.
#
#   Exit status: 0 all models agree, 1 a model disagrees or did not
#   converge, 2 bad input or configuration.
#
# Usage:
#   python main.py tests/resources/pagerank.txt
#   python main.py gs://my-bucket/graphs/web.txt --workers 8 --progress
#
# References:
#   [1] Page, L., Brin, S., Motwani, R., & Winograd, T. (1999).
#       "The PageRank Citation Ranking: Bringing Order to the Web."
#       http://dbpubs.stanford.edu:8090/pub/showDoc.Fulltext?lang=en&doc=1999-66&format=pdf

import argparse

import pregel_pagerank.stage1_read
import pregel_pagerank.stage2_stats
import pregel_pagerank.stage3_pagerank
import pregel_pagerank.stage4_validation
import pregel_pagerank.utils as utils
from pregel_pagerank.config import PageRankConfig, DEFAULT_DAMPING, DEFAULT_MAX_ITERATIONS, DEFAULT_TOLERANCE
from pregel_pagerank.errors import PageRankError, NonConvergence


def build_parser():
    parser = argparse.ArgumentParser(description="PageRank with a Pregel-style BSP engine")
    parser.add_argument('source', help="Graph file path or gs://bucket/object")
    parser.add_argument('--damping', type=float, default=DEFAULT_DAMPING)
    parser.add_argument('--max-iterations', type=int, default=DEFAULT_MAX_ITERATIONS)
    parser.add_argument('--tolerance', type=float, default=DEFAULT_TOLERANCE,
                        help="Global L1 change that ends the run (0 = run to --max-iterations)")
    parser.add_argument('--per-vertex-tolerance', type=float, default=0.0,
                        help="|delta| below which a vertex votes to halt (0 = never)")
    parser.add_argument('--workers', type=int, default=1, help="Worker threads per superstep")
    parser.add_argument('--methods', nargs='+', default=['pregel', 'reference'],
                        choices=sorted(pregel_pagerank.stage3_pagerank.COMPUTE_MODELS))
    parser.add_argument('--strict', action='store_true',
                        help="Every vertex must have its own record; undeclared targets are errors")
    parser.add_argument('--check-tolerance', type=float, default=1.0e-5)
    parser.add_argument('--top', type=int, default=5)
    parser.add_argument('--plot-dir', default=None, help="Write validation plots here")
    parser.add_argument('--progress', action='store_true', help="Show a superstep progress bar")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    utils.print_project_banner()

    try:
        config = PageRankConfig.from_args(args)

        # Stage 1
        graph = pregel_pagerank.stage1_read.load(args.source, implicit_vertices=not args.strict)

        # Stage 2
        pregel_pagerank.stage2_stats.run_stats(graph)

        # Stage 3
        methods = list(dict.fromkeys(['reference'] + args.methods))
        results = {}
        for method in methods:
            results[method] = pregel_pagerank.stage3_pagerank.compute_pagerank(
                graph, config, method=method, progress=args.progress)
    except NonConvergence as err:
        utils.print_error(str(err))
        return 1
    except (PageRankError, OSError) as err:
        utils.print_error(str(err))
        return 2

    # Stage 4
    reference = results['reference']
    ok = True
    for method, result in results.items():
        if method == 'reference':
            continue
        report = pregel_pagerank.stage4_validation.verify_results(
            reference.ranks, result.ranks, labels=("Reference", method),
            tolerance=args.check_tolerance, top=args.top)
        ok = ok and report.equivalent
        if args.plot_dir and len(graph):
            pregel_pagerank.stage4_validation.plot_validation(
                reference.ranks, result.ranks, args.plot_dir, labels=("Reference", method))

    if args.plot_dir:
        pregel_pagerank.stage4_validation.plot_convergence(list(results.values()), args.plot_dir)

    return 0 if ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
