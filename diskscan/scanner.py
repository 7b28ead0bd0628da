"""Concurrent recursive directory scanner."""

from __future__ import annotations

import asyncio
import os
import re
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path

from diskscan.progress import ProgressReporter, ProgressUpdate


def _quoted(path: os.PathLike | str) -> str:
    return f'"{os.fspath(path)}"'


def _default_concurrency() -> int:
    return (os.cpu_count() or 1) * 2


@dataclass
class ScannerConfig:
    """Settings for one scan."""

    target_path: Path
    max_concurrent_tasks: int = field(default_factory=_default_concurrency)
    follow_symlinks: bool = False
    include_hidden: bool = True
    progress_updates: bool = True
    verbose: bool = False
    file_pattern: re.Pattern | None = None

    def __post_init__(self) -> None:
        self.target_path = Path(self.target_path)


class ScanError(Exception):
    """Base class of errors met while scanning; carries the offending path."""

    def __init__(self, path: os.PathLike | str, message: str) -> None:
        super().__init__(message)
        self.path = Path(path)


class ScanIOError(ScanError):
    def __init__(self, path: os.PathLike | str, source: OSError) -> None:
        self.source = source
        super().__init__(path, f"I/O error accessing {_quoted(path)}: {source}")


class ScanNotADirectoryError(ScanError):
    def __init__(self, path: os.PathLike | str) -> None:
        super().__init__(path, f"Path is not a directory: {_quoted(path)}")


class ScanMetadataError(ScanError):
    def __init__(self, path: os.PathLike | str, source: OSError) -> None:
        self.source = source
        super().__init__(path, f"Failed to read metadata for {_quoted(path)}: {source}")


@dataclass
class ScanResult:
    """Totals of a finished scan; ``scan_duration`` is in seconds."""

    total_files: int
    total_directories: int
    total_size: int
    scan_duration: float
    errors: list[ScanError] = field(default_factory=list)
    matching_files: list[Path] = field(default_factory=list)


@dataclass
class _Tally:
    files: int = 0
    directories: int = 0
    size: int = 0
    errors: list[ScanError] = field(default_factory=list)
    matches: list[Path] = field(default_factory=list)

    def absorb(self, other: _Tally) -> None:
        self.files += other.files
        self.directories += other.directories
        self.size += other.size
        self.errors.extend(other.errors)
        self.matches.extend(other.matches)


@dataclass
class _Listing:
    tally: _Tally = field(default_factory=_Tally)
    subdirs: list[Path] = field(default_factory=list)
    events: list[ProgressUpdate] = field(default_factory=list)

    def fail(self, error: ScanError) -> None:
        self.tally.errors.append(error)
        self.events.append(ProgressUpdate.error())

    def add_file(self, size: int) -> None:
        self.tally.files += 1
        self.tally.size += size
        self.events.append(ProgressUpdate.new_item())
        self.events.append(ProgressUpdate.bytes_processed(size))

    def add_dir(self, path: Path) -> None:
        self.tally.directories += 1
        self.events.append(ProgressUpdate.new_item())
        self.subdirs.append(path)


def _is_hidden(name: str) -> bool:
    return name.startswith(".") and name not in (".", "..")


def _classify(entry: os.DirEntry, config: ScannerConfig, listing: _Listing) -> None:
    path = Path(entry.path)
    if config.verbose:
        print(f"[VERBOSE] Processing entry: {_quoted(path)}")
    if not config.include_hidden and _is_hidden(entry.name):
        return

    try:
        is_link = entry.is_symlink()
        is_file = not is_link and entry.is_file(follow_symlinks=False)
        is_dir = not is_link and not is_file and entry.is_dir(follow_symlinks=False)
    except OSError as exc:
        listing.fail(ScanIOError(path, exc))
        return

    if is_link:
        if not config.follow_symlinks:
            return
        try:
            target = os.stat(path)
        except OSError as exc:
            listing.fail(ScanMetadataError(path, exc))
            return
        if os.path.stat.S_ISREG(target.st_mode):
            listing.add_file(target.st_size)
        elif os.path.stat.S_ISDIR(target.st_mode):
            listing.add_dir(path)
    elif is_file:
        try:
            size = entry.stat(follow_symlinks=False).st_size
        except OSError as exc:
            listing.fail(ScanMetadataError(path, exc))
            return
        listing.add_file(size)
        if config.file_pattern is not None and config.file_pattern.search(entry.name):
            listing.tally.matches.append(path)
    elif is_dir:
        listing.add_dir(path)


def _list_directory(path: Path, config: ScannerConfig) -> _Listing:
    listing = _Listing()
    try:
        entries = os.scandir(path)
    except OSError as exc:
        listing.fail(ScanIOError(path, exc))
        return listing
    with entries:
        while True:
            try:
                entry = next(entries)
            except StopIteration:
                break
            except OSError as exc:
                listing.fail(ScanIOError(path, exc))
                break
            _classify(entry, config, listing)
    return listing


async def _walk(
    path: Path,
    config: ScannerConfig,
    semaphore: asyncio.Semaphore,
    queue: asyncio.Queue | None,
) -> _Tally:
    async with semaphore:
        if config.verbose:
            print(f"[VERBOSE] Reading directory (permit acquired): {_quoted(path)}")
        listing = await asyncio.to_thread(_list_directory, path, config)
        if config.verbose:
            print(
                f"[VERBOSE] Releasing permit for: {_quoted(path)}, "
                f"collected {len(listing.subdirs)} sub-paths to spawn"
            )

    if queue is not None:
        for event in listing.events:
            queue.put_nowait(event)

    tasks = []
    for sub_path in listing.subdirs:
        if config.verbose:
            print(
                f"[VERBOSE] Spawning task for sub-path: {_quoted(sub_path)} "
                f"(parent: {_quoted(path)})"
            )
        tasks.append(asyncio.create_task(_walk(sub_path, config, semaphore, queue)))

    tally = listing.tally
    for outcome in await asyncio.gather(*tasks, return_exceptions=True):
        if isinstance(outcome, BaseException):
            print(
                f"Task panicked or was cancelled for a sub-path of {_quoted(path)}: {outcome!r}",
                file=sys.stderr,
            )
            if queue is not None:
                queue.put_nowait(ProgressUpdate.error())
        else:
            tally.absorb(outcome)
    return tally


async def run_scan(config: ScannerConfig) -> ScanResult:
    """Walk ``config.target_path`` recursively and return the totals.

    Raises ScanNotADirectoryError or ScanIOError if the root cannot be scanned,
    and ValueError if the concurrency limit is below one.
    """
    if config.max_concurrent_tasks < 1:
        raise ValueError("max_concurrent_tasks must be at least 1")
    started = time.perf_counter()

    root = Path(config.target_path)
    try:
        meta = await asyncio.to_thread(os.stat, root)
    except OSError as exc:
        raise ScanIOError(root, exc) from exc
    if not os.path.stat.S_ISDIR(meta.st_mode):
        raise ScanNotADirectoryError(root)

    queue: asyncio.Queue | None = None
    reporter_task = None
    if config.progress_updates:
        queue = asyncio.Queue()
        reporter_task = asyncio.create_task(ProgressReporter().run(queue))
        queue.put_nowait(ProgressUpdate.new_item())

    semaphore = asyncio.Semaphore(config.max_concurrent_tasks)
    tally = await _walk(root, config, semaphore, queue)

    if queue is not None and reporter_task is not None:
        queue.put_nowait(ProgressUpdate.completed())
        await reporter_task

    result = ScanResult(
        total_files=tally.files,
        total_directories=tally.directories + 1,
        total_size=tally.size,
        scan_duration=time.perf_counter() - started,
        errors=tally.errors,
        matching_files=tally.matches,
    )
    if not config.progress_updates:
        print("Scanner Engine: Scan complete.")
    return result