#!/usr/bin/env python3
"""Run local log/data files through the upload orchestrator.

Uses the simulated transport, so nothing leaves the machine. Prints the
validation outcome, the pairing view as uploads progress, and the session
requests that would be sent for completed pairs.
"""

import argparse
import asyncio
import random

from ppz_logalyzer.core import configure_logging, configure_logging_from_env
from ppz_logalyzer.upload import (
    FileHandle,
    FilePair,
    PairStatus,
    SimulatedTransport,
    UploadConfig,
    UploadOrchestrator,
    format_file_size,
)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("files", nargs="+", help="Paths to .log/.data files")
    parser.add_argument("--tick", type=float, default=0.5, help="Seconds between progress ticks")
    parser.add_argument("--failure-rate", type=float, default=0.0, help="Chance a tick fails")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible progress")
    parser.add_argument("--log-level", default=None, help="Log level (default: PPZ_LOG_LEVEL or WARNING)")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON logs")
    return parser.parse_args()


def print_pairs(pairs: list[FilePair]) -> None:
    for pair in pairs:
        members = []
        for item in (pair.data_item, pair.log_item):
            if item is not None:
                members.append(f"{item.file_name} {item.progress:5.1f}% {item.status.value}")
        print(f"  {pair.id:<30} {pair.status.value:<10} {' | '.join(members)}")


async def run(args: argparse.Namespace) -> None:
    transport = SimulatedTransport(
        tick_interval=args.tick,
        failure_rate=args.failure_rate,
        rng=random.Random(args.seed),
    )
    orchestrator = UploadOrchestrator(
        config=UploadConfig.from_env(),
        transport=transport,
    )

    print("=" * 60)
    print("STEP 1: File Selection")
    print("=" * 60)
    handles = [FileHandle.from_path(path) for path in args.files]
    for handle in handles:
        print(f"  {handle.name} ({format_file_size(handle.size)})")

    accepted = orchestrator.submit_files(handles)
    print(f"Accepted: {len(accepted)} of {len(handles)}")
    for message in orchestrator.errors:
        print(f"Rejected: {message}")

    print("\n" + "=" * 60)
    print("STEP 2: Upload Progress")
    print("=" * 60)
    async with orchestrator:
        waiter = asyncio.ensure_future(orchestrator.wait_for_uploads())
        while not waiter.done():
            summary = orchestrator.summary
            print(
                f"Overall {summary.overall_progress:5.1f}% - "
                f"{summary.completed_pairs} completed, {summary.ready_pairs} ready, "
                f"{summary.incomplete_pairs} incomplete"
            )
            await asyncio.wait([waiter], timeout=max(args.tick, 0.1))
        await waiter

    print("\n" + "=" * 60)
    print("STEP 3: Pairs")
    print("=" * 60)
    print_pairs(orchestrator.pairs)

    print("\n" + "=" * 60)
    print("STEP 4: Session Requests")
    print("=" * 60)
    for pair in orchestrator.ready_pairs:
        if pair.status == PairStatus.COMPLETED:
            print(pair.to_session_request().model_dump_json(indent=2))


def main():
    args = parse_args()
    if args.log_level:
        configure_logging(level=args.log_level, json_format=args.json_logs)
    else:
        configure_logging_from_env(default_level="WARNING", default_json=args.json_logs)
    asyncio.run(run(args))


if __name__ == "__main__":
    main()
