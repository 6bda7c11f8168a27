#!/usr/bin/env python3
"""Summarize BSOR replay files: session info and per-block record counts."""

from __future__ import annotations

import argparse
import glob
import logging
from pathlib import Path
import sys
from typing import Iterable, List

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from bsor import (  # noqa: E402
    DATA_BLOCKS,
    BlockType,
    Note,
    Replay,
    ReplayError,
    build_index,
    decode_full,
)

log = logging.getLogger("inspect_bsor")

BLOCK_NAMES = {bt.label: bt for bt in DATA_BLOCKS}


def collect_paths(patterns: Iterable[str]) -> List[Path]:
    paths: List[Path] = []
    for pattern in patterns:
        matches = sorted(Path(p) for p in glob.glob(pattern, recursive=True))
        if matches:
            paths.extend(matches)
        else:
            # Treat literal path when glob finds nothing.
            candidate = Path(pattern)
            if candidate.exists():
                paths.append(candidate)
    seen: set[Path] = set()
    unique_paths: List[Path] = []
    for path in paths:
        resolved = path.resolve()
        if resolved not in seen:
            seen.add(resolved)
            unique_paths.append(path)
    return unique_paths


def summarize_block(block_type: BlockType, items: list) -> str:
    if not items:
        return f"{block_type.label}: empty"
    if block_type is BlockType.NOTES:
        cut = sum(1 for n in items if isinstance(n, Note) and n.is_cut)
        by_event: dict[str, int] = {}
        for note in items:
            by_event[note.event_type.name] = by_event.get(note.event_type.name, 0) + 1
        parts = ", ".join(f"{k.lower()}={v}" for k, v in sorted(by_event.items()))
        return f"notes: {len(items)} ({parts}; {cut} with cut info)"
    first = getattr(items[0], "time", None)
    last = getattr(items[-1], "time", None)
    if first is None:
        return f"{block_type.label}: {len(items)}"
    return f"{block_type.label}: {len(items)} (t={first:.3f}..{last:.3f})"


def info_cells(version: int, replay_info) -> list[str]:
    return [
        str(version),
        replay_info.player_name,
        replay_info.song_name,
        f"{replay_info.mode}/{replay_info.difficulty}",
        str(replay_info.score),
        "fail" if replay_info.failed else "clear",
    ]


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Show session info and block sizes for .bsor replay files."
    )
    parser.add_argument(
        "paths",
        nargs="+",
        help="File paths or glob patterns (quotes recommended for wildcards).",
    )
    parser.add_argument(
        "--lazy",
        action="store_true",
        help="Index blocks instead of decoding them; also prints block offsets.",
    )
    parser.add_argument(
        "--block",
        choices=sorted(BLOCK_NAMES),
        help="Decode one block and print a summary of its records.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    targets = collect_paths(args.paths)
    if not targets:
        parser.error("No files matched the provided paths/patterns.")

    header = ["File", "Ver", "Player", "Song", "Mode", "Score", "Result"]
    header += [bt.label.capitalize() for bt in DATA_BLOCKS]
    rows: list[list[str]] = []
    details: list[str] = []
    failed = 0

    for path in targets:
        try:
            with path.open("rb") as fh:
                if args.lazy:
                    index = build_index(fh)
                    cells = info_cells(index.version, index.info)
                    cells += [str(index.count(bt)) for bt in DATA_BLOCKS]
                    for entry in index.entries:
                        details.append(
                            f"{path}: {entry.block_type.label} @0x{entry.offset:X} "
                            f"count={entry.count} bytes={entry.size}"
                        )
                    if args.block:
                        bt = BLOCK_NAMES[args.block]
                        details.append(f"{path}: {summarize_block(bt, index.load(bt, fh))}")
                else:
                    replay: Replay = decode_full(fh)
                    cells = info_cells(replay.version, replay.info)
                    cells += [str(len(replay.block(bt))) for bt in DATA_BLOCKS]
                    if args.block:
                        bt = BLOCK_NAMES[args.block]
                        details.append(f"{path}: {summarize_block(bt, replay.block(bt))}")
        except (OSError, ReplayError) as err:
            log.debug("failed to read %s", path, exc_info=True)
            failed += 1
            rows.append([str(path), "ERR", f"{type(err).__name__}: {err}"] + [""] * (len(header) - 3))
            continue
        rows.append([str(path)] + cells)

    widths = [
        max(len(row[i]) for row in ([header] + rows))
        for i in range(len(header))
    ]

    def fmt_row(row: list[str]) -> str:
        return "  ".join(cell.ljust(widths[i]) for i, cell in enumerate(row)).rstrip()

    print(fmt_row(header))
    print("  ".join("-" * w for w in widths))
    for row in rows:
        print(fmt_row(row))
    if details:
        print()
        for line in details:
            print(line)

    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
