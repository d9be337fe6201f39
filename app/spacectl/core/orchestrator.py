"""Concurrent scan orchestration.

Runs a set of scanners with bounded parallelism. A fixed pool of worker
tasks pulls scanner indices from a shared cursor; each scanner's blocking
filesystem work runs in a thread. A scanner that raises is reported as a
failed result and never affects the others.
"""

import asyncio
import logging
from collections.abc import Callable, Sequence

from spacectl.models.item import ScanResult, ScanSummary
from spacectl.scanners.base import Scanner, ScanOptions
from spacectl.scanners.registry import get_all_scanners

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 4

# Called with (completed, total, scanner) after each scanner finishes.
ScanProgressCallback = Callable[[int, int, Scanner], None]


def _failed_result(scanner: Scanner, error: BaseException) -> ScanResult:
    message = str(error) or type(error).__name__
    return ScanResult(category=scanner.category, items=(), error=message)


async def _run_scanner(scanner: Scanner, options: ScanOptions) -> ScanResult:
    try:
        return await asyncio.to_thread(scanner.scan, options)
    except Exception as e:
        logger.warning("Scanner %s failed: %s", scanner.category_id.value, e)
        return _failed_result(scanner, e)


async def run_all_scans(
    scanners: Sequence[Scanner] | None = None,
    *,
    parallel: bool = True,
    concurrency: int = DEFAULT_CONCURRENCY,
    options: ScanOptions | None = None,
    on_progress: ScanProgressCallback | None = None,
) -> ScanSummary:
    """Run scanners and collect their results.

    Args:
        scanners: Scanners to run. Defaults to every registered scanner.
        parallel: Run up to ``concurrency`` scanners at once. If False,
            scanners run one after another in order.
        concurrency: Maximum number of scanners in flight; values below 1
            are treated as 1.
        options: Options passed to every scanner.
        on_progress: Invoked once per finished scanner, in completion order.

    Returns:
        ScanSummary with one result per scanner, in input order.
    """
    targets = list(scanners) if scanners is not None else get_all_scanners()
    scan_options = options or ScanOptions()
    total = len(targets)
    results: list[ScanResult | None] = [None] * total
    completed = 0

    def _report(scanner: Scanner) -> None:
        nonlocal completed
        completed += 1
        if on_progress is not None:
            on_progress(completed, total, scanner)

    if not parallel:
        for index, scanner in enumerate(targets):
            results[index] = await _run_scanner(scanner, scan_options)
            _report(scanner)
    else:
        cursor = 0

        async def _worker() -> None:
            nonlocal cursor
            while cursor < total:
                # Claim and advance without yielding: the loop is single-threaded
                index = cursor
                cursor += 1
                scanner = targets[index]
                results[index] = await _run_scanner(scanner, scan_options)
                _report(scanner)

        workers = min(max(concurrency, 1), total)
        logger.debug("Running %d scanners with %d workers", total, workers)
        await asyncio.gather(*(_worker() for _ in range(workers)))

    return ScanSummary(results=tuple(r for r in results if r is not None))


def scan_all(
    scanners: Sequence[Scanner] | None = None,
    *,
    parallel: bool = True,
    concurrency: int = DEFAULT_CONCURRENCY,
    options: ScanOptions | None = None,
    on_progress: ScanProgressCallback | None = None,
) -> ScanSummary:
    """Synchronous wrapper around run_all_scans().

    Must not be called from inside a running event loop.
    """
    return asyncio.run(
        run_all_scans(
            scanners,
            parallel=parallel,
            concurrency=concurrency,
            options=options,
            on_progress=on_progress,
        )
    )
