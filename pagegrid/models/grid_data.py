"""Row and cell records, dataset generators and the serialized grid form."""

import random
from dataclasses import dataclass, field
from typing import Any, List, Optional, Union

CellValue = Union[str, int, float]

GRID_NODE_TYPE = 'grid'
GRID_NODE_VERSION = 1


@dataclass(frozen=True)
class GridCell:
    id: str
    value: CellValue

    def to_dict(self) -> dict:
        return {'id': self.id, 'value': self.value}

    @classmethod
    def from_dict(cls, data: dict) -> 'GridCell':
        return cls(id=str(data['id']), value=data['value'])


@dataclass(frozen=True)
class GridRow:
    """A fetched row. Immutable once it lands in the row store."""
    id: str
    cells: tuple = field(default_factory=tuple)

    def __post_init__(self):
        # Accept any iterable of cells but always store a tuple.
        if not isinstance(self.cells, tuple):
            object.__setattr__(self, 'cells', tuple(self.cells))

    def to_dict(self) -> dict:
        return {'cells': [cell.to_dict() for cell in self.cells], 'id': self.id}

    @classmethod
    def from_dict(cls, data: dict) -> 'GridRow':
        return cls(id=str(data['id']),
                   cells=tuple(GridCell.from_dict(cell) for cell in data.get('cells', [])))


def _single_cell_rows(rows: int, label: str) -> List[GridRow]:
    return [GridRow(id=f'row-{row_idx}',
                    cells=(GridCell(id=f'cell-{row_idx}-0',
                                    value=f'{label} {row_idx + 1}'),))
            for row_idx in range(rows)]


def create_large_grid_data(rows: int = 1000) -> List[GridRow]:
    return _single_cell_rows(rows, 'Row')


def create_extra_large_grid_data(rows: int = 2000) -> List[GridRow]:
    return _single_cell_rows(rows, 'Row')


def create_performance_test_data(rows: int) -> List[GridRow]:
    return _single_cell_rows(rows, 'Performance Row')


RANDOM_HEADER = ['ID', 'Name', 'Age', 'Department', 'Salary', 'Email',
                 'Phone', 'Address', 'Start Date', 'Status']
_NAMES = ['Alice', 'Bob', 'Charlie', 'Diana', 'Eve', 'Frank', 'Grace', 'Henry']
_DEPARTMENTS = ['Engineering', 'Marketing', 'Sales', 'HR', 'Finance']


def create_random_grid_data(rows: int, seed: Optional[int] = None) -> List[GridRow]:
    """Employee-like table: a header row, then ten random columns per row."""
    rng = random.Random(seed)
    grid_data = []
    for row_idx in range(rows):
        if row_idx == 0:
            values = list(RANDOM_HEADER)
        else:
            values = [
                str(row_idx),
                rng.choice(_NAMES),
                str(20 + rng.randrange(50)),
                rng.choice(_DEPARTMENTS),
                str(30000 + rng.randrange(70000)),
                f'user{row_idx}@company.com',
                f'+1-555-{rng.randrange(1000):03d}-{rng.randrange(10000):04d}',
                f'{rng.randrange(9999)} Main St',
                f'202{rng.randrange(4)}-{rng.randrange(12) + 1:02d}-{rng.randrange(28) + 1:02d}',
                'Active' if rng.random() > 0.5 else 'Inactive',
            ]
        grid_data.append(GridRow(
            id=f'row-{row_idx}',
            cells=tuple(GridCell(id=f'cell-{row_idx}-{col_idx}', value=value)
                        for col_idx, value in enumerate(values))))
    return grid_data


@dataclass
class GridDocument:
    """Persisted form of an embedded grid: the dataset plus a row-count hint."""
    grid_data: List[GridRow]
    total_rows: Optional[int] = None

    def __post_init__(self):
        if self.total_rows is None:
            self.total_rows = len(self.grid_data)

    def export_json(self) -> dict:
        return {
            'gridData': [row.to_dict() for row in self.grid_data],
            'totalRows': self.total_rows,
            'type': GRID_NODE_TYPE,
            'version': GRID_NODE_VERSION,
        }

    @classmethod
    def import_json(cls, serialized: dict[str, Any]) -> 'GridDocument':
        node_type = serialized.get('type')
        if node_type != GRID_NODE_TYPE:
            raise ValueError(f'Expected a {GRID_NODE_TYPE!r} node, got {node_type!r}')
        version = serialized.get('version')
        if version != GRID_NODE_VERSION:
            raise ValueError(f'Unsupported grid node version: {version!r}')
        grid_data = [GridRow.from_dict(row) for row in serialized.get('gridData', [])]
        return cls(grid_data=grid_data, total_rows=serialized.get('totalRows'))
