from __future__ import annotations

import argparse
import os
import sys
import time
from typing import List, Optional

sys.path.append(os.path.dirname(os.path.dirname(__file__)))

from dragon_core.config import configure_logging, load_settings  # noqa: E402
from dragon_core.deal import Seed, deal  # noqa: E402
from dragon_core.solver import SolveResult, SolveStatus, solve  # noqa: E402


def solve_seed(seed: Seed, timeout: Optional[float], max_states: Optional[int]) -> SolveResult:
    settings = load_settings()
    if timeout is not None:
        settings.timeout_sec = timeout
    if max_states is not None:
        settings.max_states = max_states
    return solve(deal(seed).do_automoves(), settings.make_context())


def process(args: argparse.Namespace) -> None:
    seeds: List[Seed] = [Seed.from_string(s) for s in args.seed] if args.seed else []
    seeds.extend(Seed.random() for _ in range(max(0, int(args.count)) - len(seeds)))
    start_time = time.time()
    counts = {status: 0 for status in SolveStatus}
    move_counts: List[int] = []

    for seed in seeds:
        res = solve_seed(seed, args.timeout, args.max_states)
        counts[res.status] += 1
        if res.move_count is not None:
            move_counts.append(res.move_count)
        print(f"{seed} {res.status.value} moves={res.move_count} expanded={res.metrics.states_expanded} "
              f"ms={res.metrics.computation_time_ms:.0f}")

    elapsed = time.time() - start_time
    mean_moves = sum(move_counts) / len(move_counts) if move_counts else 0.0
    summary = " ".join(f"{status.value}={n}" for status, n in counts.items())
    print(f"Processed={len(seeds)} {summary} mean_moves={mean_moves:.1f} elapsed_sec={elapsed:.1f}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Solve a batch of dragon solitaire deals and summarise the outcomes")
    parser.add_argument('--count', type=int, default=10, help='Number of deals to solve (default 10)')
    parser.add_argument('--seed', action='append', default=None, help='Seed text to include (repeatable)')
    parser.add_argument('--timeout', type=float, default=30.0, help='Per-deal time budget in seconds')
    parser.add_argument('--max-states', type=int, default=None, help='Per-deal budget in expanded boards')
    parser.add_argument('--verbose', action='store_true', help='Debug logging')
    args = parser.parse_args()
    configure_logging(args.verbose)
    process(args)


if __name__ == '__main__':
    main()
