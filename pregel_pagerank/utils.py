# utils.py
#
# Project: Pregel PageRank Engine
# Author:  Haozhe Jia <jimmyjia@bu.edu>
# Course:  CS528 Cloud Computing, Boston University, Spring 2026
#
# Description:
#   Terminal output for every stage and the CLI driver.  Progress lines go
#   to stdout, errors to stderr so `main.py` can be piped.
#
# Components:
#   Colors               - ANSI codes used by the helpers below.
#   print_project_banner - Banner printed once by the CLI driver.
#   print_stage / print_step / print_success / print_warning / print_error
#                        - One-line log output with a colored prefix.
#   print_summary_box    - Bordered key/value table.
#   print_side_by_side_boxes
#                        - Two tables on the same lines, e.g. the
#                          [Reference Top 5] [Pregel Top 5] comparison.
#   Timer                - Context manager reporting elapsed wall time.

import sys
import time
from itertools import zip_longest


class Colors:
    BLUE = '\033[94m'
    CYAN = '\033[96m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    BOLD = '\033[1m'
    DIM = '\033[2m'
    RESET = '\033[0m'


def print_project_banner(width=90):
    """Print the project banner."""
    rule = f"{Colors.BOLD}{Colors.BLUE}{'=' * width}{Colors.RESET}"
    print(f"\n{rule}")
    print(f"  {Colors.BOLD}Pregel PageRank Engine{Colors.RESET}")
    print(rule)
    print(f"  {Colors.DIM}Author:{Colors.RESET}  Haozhe Jia <jimmyjia@bu.edu>")
    print(f"  {Colors.DIM}Ref:{Colors.RESET}     Page, Brin, Motwani & Winograd (1999),"
          f" {Colors.DIM}\"The PageRank Citation Ranking\"{Colors.RESET}")
    print(f"           Malewicz et al. (2010),"
          f" {Colors.DIM}\"Pregel: A System for Large-Scale Graph Processing\"{Colors.RESET}")
    print(f"{rule}\n")


def print_stage(name, message):
    print(f"{Colors.BOLD}{Colors.CYAN}[{name}]{Colors.RESET} {message}")


def print_step(message):
    print(f"  {Colors.DIM}->{Colors.RESET} {message}")


def print_success(message):
    print(f"  {Colors.GREEN}[OK]{Colors.RESET} {message}")


def print_warning(message):
    print(f"  {Colors.YELLOW}[WARN]{Colors.RESET} {message}")


def print_error(message):
    """Print an error line to stderr."""
    print(f"  {Colors.RED}[ERR]{Colors.RESET} {message}", file=sys.stderr)


def _box_lines(title, stats, width):
    """
    Render a titled key/value box as a list of lines.

    Args:
        title (str): Box title, shown in bold
        stats (dict): Rows, rendered as "key: value" in insertion order
        width (int): Inner width; longer rows are not truncated

    Returns:
        list[str]: Lines without a leading indent
    """
    border = f"+{'-' * width}+"
    lines = [border, f"| {Colors.BOLD}{title:<{width - 1}}{Colors.RESET}|", border]
    for key, val in stats.items():
        row = f" {key}: {val}"
        lines.append(f"|{row:<{width}}|")
    lines.append(border)
    return lines


def print_summary_box(title, stats, width=50):
    print()
    for line in _box_lines(title, stats, width):
        print(f"  {line}")
    print()


def print_side_by_side_boxes(title_l, stats_l, title_r, stats_r, col_width=38, gap=3):
    """
    Print two boxes next to each other.  The shorter box is padded with
    blank lines so the rows stay aligned.
    """
    left = _box_lines(title_l, stats_l, col_width)
    right = _box_lines(title_r, stats_r, col_width)
    blank = ' ' * (col_width + 2)
    spacer = ' ' * gap

    print()
    for l, r in zip_longest(left, right, fillvalue=blank):
        print(f"  {l}{spacer}{r}")
    print()


class Timer:
    """Context manager that reports how long its block took."""

    def __init__(self, label="Operation"):
        self.label = label
        self.start = None
        self.elapsed = None

    def __enter__(self):
        self.start = time.perf_counter()
        return self

    def __exit__(self, *exc):
        self.elapsed = time.perf_counter() - self.start
        if exc[0] is None:
            print_success(f"{self.label} completed in {self.elapsed:.2f}s")
