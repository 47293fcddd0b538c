"""
Sparse row store sized to the full dataset.

Only fetched rows are held, keyed by global index; every other slot reads
back as absent. Nothing is ever evicted, so a page that has been fetched
stays available for the lifetime of the store.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from pagegrid.models.grid_data import GridRow
from pagegrid.utils.range_calculator import VisibleRange
from pagegrid.utils.settings import GridConfigError


@dataclass(frozen=True)
class RowSlot:
    """One slot of the window. `present` is False until the owning page lands."""
    index: int
    row: Optional[GridRow] = None

    @property
    def present(self) -> bool:
        return self.row is not None


class RowStore:
    def __init__(self, total_rows: int, page_size: int):
        if total_rows <= 0:
            raise GridConfigError(f'total_rows must be positive, got {total_rows}')
        if page_size <= 0:
            raise GridConfigError(f'page_size must be positive, got {page_size}')
        self.total_rows = total_rows
        self.page_size = page_size
        self._rows: Dict[int, GridRow] = {}

    def __len__(self):
        return self.total_rows

    @property
    def fetched_count(self) -> int:
        return len(self._rows)

    def page_for_index(self, index: int) -> int:
        return index // self.page_size

    def page_bounds(self, page_index: int) -> tuple[int, int]:
        """Inclusive global index bounds of a page, clipped to the dataset."""
        start = page_index * self.page_size
        end = min(start + self.page_size, self.total_rows) - 1
        return start, end

    def has_row(self, index: int) -> bool:
        return index in self._rows

    def get_row(self, index: int) -> Optional[GridRow]:
        return self._rows.get(index)

    def merge_page(self, page_index: int, rows: Iterable[GridRow]) -> int:
        """
        Write a page's rows at their global offsets.

        Rows beyond the page size or past `total_rows` are dropped. Returns
        the number of rows written.
        """
        start, end = self.page_bounds(page_index)
        written = 0
        for offset, row in enumerate(rows):
            index = start + offset
            if offset >= self.page_size or index > end:
                break
            self._rows[index] = row
            written += 1
        return written

    def get_visible_slice(self, visible_range: VisibleRange) -> List[RowSlot]:
        if visible_range.empty:
            return []
        start = max(0, visible_range.start_index)
        end = min(self.total_rows - 1, visible_range.end_index)
        return [RowSlot(index, self._rows.get(index)) for index in range(start, end + 1)]
