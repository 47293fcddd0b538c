import math
from dataclasses import dataclass


@dataclass(frozen=True)
class VisibleRange:
    """Inclusive row-index interval; `empty` ranges have no rows at all."""
    start_index: int
    end_index: int

    @property
    def empty(self) -> bool:
        return self.end_index < self.start_index

    def __len__(self):
        return 0 if self.empty else self.end_index - self.start_index + 1

    def __iter__(self):
        return iter(range(self.start_index, self.end_index + 1))


EMPTY_RANGE = VisibleRange(0, -1)


def calculate_visible_range(scroll_offset: float, viewport_height: float,
                            row_height: float, overscan: int,
                            total_rows: int) -> VisibleRange:
    """Map a scroll position to the rows that must be rendered.

    The start is pulled back and the end pushed forward by `overscan` rows,
    then both are clamped to `[0, total_rows - 1]`. An empty dataset yields
    `EMPTY_RANGE` instead of a negative end index.
    """
    if total_rows <= 0:
        return EMPTY_RANGE
    if row_height <= 0:
        raise ValueError(f'row_height must be positive, got {row_height}')
    scroll_offset = max(0, scroll_offset)
    start_index = max(0, math.floor(scroll_offset / row_height) - overscan)
    end_index = min(total_rows - 1,
                    math.ceil((scroll_offset + viewport_height) / row_height) + overscan)
    # Offsets past the content end still show the last rows.
    start_index = min(start_index, end_index)
    return VisibleRange(start_index, end_index)
