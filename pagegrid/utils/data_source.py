"""
Page data sources.

A data source hands back one page of rows per call. Calls are blocking and
run on the scheduler's worker threads, never on the GUI thread. Raising any
exception marks the page as errored.
"""

import random
import threading
import time
from typing import List, Optional, Protocol, Sequence

from pagegrid.models.grid_data import GridRow, create_large_grid_data


class PageFetchError(RuntimeError):
    """A page could not be retrieved."""


class DataSource(Protocol):
    def fetch_page(self, page_index: int, page_size: int) -> List[GridRow]:
        ...


class ListDataSource:
    """Serves pages by slicing an in-memory dataset."""

    def __init__(self, rows: Sequence[GridRow]):
        self._rows = list(rows)

    @property
    def total_rows(self) -> int:
        return len(self._rows)

    def fetch_page(self, page_index: int, page_size: int) -> List[GridRow]:
        if page_index < 0:
            raise PageFetchError(f'Invalid page index {page_index}')
        start = page_index * page_size
        return self._rows[start:start + page_size]


class SimulatedDataSource(ListDataSource):
    """
    Remote-backend stand-in for the demo window.

    Each fetch sleeps for a random latency between half and one and a half
    times `latency_ms`, then fails with probability `failure_rate`.
    """

    def __init__(self, rows: Optional[Sequence[GridRow]] = None,
                 total_rows: int = 1000, latency_ms: int = 300,
                 failure_rate: float = 0.0, seed: Optional[int] = None):
        if rows is None:
            rows = create_large_grid_data(total_rows)
        super().__init__(rows)
        self.latency_ms = latency_ms
        self.failure_rate = failure_rate
        self._rng = random.Random(seed)
        # random.Random is shared across worker threads.
        self._rng_lock = threading.Lock()

    def fetch_page(self, page_index: int, page_size: int) -> List[GridRow]:
        with self._rng_lock:
            delay = self.latency_ms * (0.5 + self._rng.random()) / 1000.0
            fail = self._rng.random() < self.failure_rate
        if delay > 0:
            time.sleep(delay)
        if fail:
            raise PageFetchError(f'Simulated failure for page {page_index}')
        return super().fetch_page(page_index, page_size)
