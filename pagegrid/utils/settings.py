from dataclasses import dataclass

from PySide6.QtCore import QSettings, Signal

# Defaults for settings that are accessed from multiple places.
DEFAULT_SETTINGS = {
    'page_size': 20,  # Rows fetched per request
    'prefetch_margin': 2,  # Prefetch reaches this many pages past the visible block on each side
    'overscan': 5,  # Extra rows rendered above and below the viewport
    'throttle_interval_ms': 100,  # Minimum spacing between range recomputations
    'row_height': 60,
    'container_height': 400,
    'fetch_workers': 4,  # Worker threads issuing page fetches
    'flow_trace_logs': False,  # Print [TRACE] flow lines for planning/fetching
    # Demo window
    'demo_total_rows': 1000,
    'demo_document_path': '',  # Empty = generate demo_total_rows rows
    'demo_latency_ms': 300,
    'demo_failure_rate': 0.0,
}


class Settings(QSettings):
    # Signal that shows that the setting with the given string was changes
    change = Signal(str, object, name='settingsChanged')

    def __init__(self):
        super().__init__('pagegrid', 'pagegrid')

    def setValue(self, key, value):
        super().setValue(key, value)
        self.change.emit(key, value)

# Common shared instance to ensure the Signal is also shared
settings = Settings()


class GridConfigError(ValueError):
    """Raised when the embedding host passes an unusable grid geometry."""


@dataclass(frozen=True)
class GridConfig:
    """Geometry and paging constants, fixed for the lifetime of a grid."""
    total_rows: int
    page_size: int = DEFAULT_SETTINGS['page_size']
    row_height: int = DEFAULT_SETTINGS['row_height']
    container_height: int = DEFAULT_SETTINGS['container_height']
    overscan: int = DEFAULT_SETTINGS['overscan']
    prefetch_margin: int = DEFAULT_SETTINGS['prefetch_margin']
    throttle_interval_ms: int = DEFAULT_SETTINGS['throttle_interval_ms']

    def __post_init__(self):
        self.validate()

    def validate(self):
        if self.total_rows <= 0:
            raise GridConfigError(f'total_rows must be positive, got {self.total_rows}')
        if self.page_size <= 0:
            raise GridConfigError(f'page_size must be positive, got {self.page_size}')
        if self.row_height <= 0:
            raise GridConfigError(f'row_height must be positive, got {self.row_height}')
        if self.container_height < 0:
            raise GridConfigError(
                f'container_height must not be negative, got {self.container_height}')
        for name in ('overscan', 'prefetch_margin', 'throttle_interval_ms'):
            value = getattr(self, name)
            if value < 0:
                raise GridConfigError(f'{name} must not be negative, got {value}')

    @property
    def total_height(self) -> int:
        return self.total_rows * self.row_height

    @property
    def page_count(self) -> int:
        return (self.total_rows + self.page_size - 1) // self.page_size

    @classmethod
    def from_settings(cls, total_rows: int) -> 'GridConfig':
        def read(key):
            return settings.value(key, defaultValue=DEFAULT_SETTINGS[key],
                                  type=int)

        return cls(
            total_rows=total_rows,
            page_size=read('page_size'),
            row_height=read('row_height'),
            container_height=read('container_height'),
            overscan=read('overscan'),
            prefetch_margin=read('prefetch_margin'),
            throttle_interval_ms=read('throttle_interval_ms'),
        )
