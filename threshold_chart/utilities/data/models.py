"""
Series data model shared by the fetcher, cache, reconciler and coordinator.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class SeriesId(Enum):
    """Selectable data sources"""

    STOCK = 'stock'
    POPULATION = 'population'

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def threshold_step(self) -> float:
        # Stock prices move in cents, population counts in thousands
        return 0.1 if self is SeriesId.STOCK else 10e3


@dataclass(frozen=True)
class Series:
    """Ordered label/value pairs for one data source.

    Labels are chronological x-axis categories, values are parallel to them.
    An empty series is valid and renders nothing.
    """

    labels: Tuple[str, ...] = ()
    values: Tuple[float, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'labels', tuple(self.labels))
        object.__setattr__(self, 'values', tuple(self.values))
        if len(self.labels) != len(self.values):
            raise ValueError(
                f"Series labels and values differ in length: {len(self.labels)} != {len(self.values)}"
            )

    def __len__(self) -> int:
        return len(self.labels)

    def head(self, count: int) -> 'Series':
        """First `count` points, earliest first"""
        if count >= len(self):
            return self
        return Series(self.labels[:count], self.values[:count])


@dataclass
class Parameters:
    series_id: SeriesId = SeriesId.STOCK
    threshold: float = 108.0
    max_points: int = 10


@dataclass(frozen=True)
class ErrorState:
    message: str


class CoordinatorState(Enum):
    IDLE = 'idle'
    LOADING = 'loading'
    READY = 'ready'
    ERROR = 'error'


@dataclass
class Dataset:
    """One line on the chart.

    `style` belongs to the renderer; the reconciler never rewrites it after build.
    """

    label: str
    data: list = field(default_factory=list)
    point_colors: Optional[list] = None
    style: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        result = dict(self.style)
        result.update({'label': self.label, 'data': list(self.data)})
        if self.point_colors is not None:
            result['point_background_color'] = list(self.point_colors)
        return result


@dataclass
class ChartState:
    labels: list
    primary: Dataset
    threshold: Dataset
    options: dict = field(default_factory=lambda: {
        'responsive': True,
        'maintain_aspect_ratio': False,
        'legend': {'display': True},
    })

    def to_dict(self) -> dict:
        return {
            'labels': list(self.labels),
            'datasets': [self.primary.to_dict(), self.threshold.to_dict()],
            'options': self.options,
        }
