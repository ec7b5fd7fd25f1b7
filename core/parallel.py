"""
core/parallel.py

Row-band splitting for the windowed stages. Each band reads only an immutable
pre-stage copy and writes a disjoint slice of output rows, so bands can run on
a thread pool without locking (numpy releases the GIL inside the arithmetic).
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Tuple

RowBand = Tuple[int, int]


def split_rows(start: int, stop: int, parts: int) -> List[RowBand]:
    """Split [start, stop) into at most `parts` contiguous, non-empty bands."""
    total = stop - start
    if total <= 0:
        return []
    parts = max(1, min(int(parts), total))
    step, extra = divmod(total, parts)
    bands = []
    lo = start
    for i in range(parts):
        hi = lo + step + (1 if i < extra else 0)
        bands.append((lo, hi))
        lo = hi
    return bands


def run_row_bands(func: Callable[[int, int], None], start: int, stop: int, workers: int = 1) -> None:
    """
    Call func(lo, hi) over [start, stop) split into row bands.
    workers <= 1 runs a single band inline. Exceptions from any band propagate.
    """
    bands = split_rows(start, stop, workers if workers and workers > 1 else 1)
    if len(bands) <= 1:
        for lo, hi in bands:
            func(lo, hi)
        return
    with ThreadPoolExecutor(max_workers=len(bands)) as pool:
        futures = [pool.submit(func, lo, hi) for lo, hi in bands]
        for fut in futures:
            fut.result()
