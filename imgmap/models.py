"""
Data models for imgmap.
"""
from dataclasses import dataclass, field
from typing import Dict, Sequence, Tuple, Any


METRIC_NAME = "pixel"


@dataclass(frozen=True)
class PixelGrid:
    """
    Read-only grid of packed RGB values.

    Rows are stored top to bottom; (0, 0) is the top-left pixel.
    """
    width: int
    height: int
    rows: Tuple[Tuple[int, ...], ...] = ()

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Invalid grid size {self.width}x{self.height}")
        if len(self.rows) != self.height:
            raise ValueError(f"Expected {self.height} rows, got {len(self.rows)}")
        for i, row in enumerate(self.rows):
            if len(row) != self.width:
                raise ValueError(f"Row {i} has {len(row)} pixels, expected {self.width}")

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "PixelGrid":
        """Build a grid from nested rows, e.g. [[10, 20], [30, 40]]."""
        frozen = tuple(tuple(int(v) for v in row) for row in rows)
        width = len(frozen[0]) if frozen else 0
        return cls(width=width, height=len(frozen), rows=frozen)

    @classmethod
    def empty(cls, width: int = 0, height: int = 0) -> "PixelGrid":
        """Grid with a zero dimension; has no pixels."""
        if width and height:
            raise ValueError("empty() needs a zero width or height")
        return cls(width=width, height=height, rows=((),) * height if width == 0 else ())

    def pixel(self, column: int, row: int) -> int:
        """Packed value at the given column of the given row."""
        return self.rows[row][column]

    @property
    def size_label(self) -> str:
        return f"{self.width}x{self.height}"

    @property
    def total(self) -> int:
        return self.width * self.height


@dataclass
class LabeledSample:
    """One pixel as a timestamped gauge datapoint."""
    value: int
    timestamp: int                              # ms since epoch, shared by the run
    labels: Dict[str, str] = field(default_factory=dict)
    metric: str = METRIC_NAME
    metric_type: str = "gauge"

    @property
    def position(self) -> str:
        return self.labels.get("position", "")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metric": self.metric,
            "value": self.value,
            "timestamp": self.timestamp,
            "dimensions": dict(self.labels),
        }


@dataclass
class RunSummary:
    """Outcome of sending one image."""
    image: str
    size: str
    timestamp: int
    encoding: str
    samples_submitted: int = 0
    first_position: str = ""
    last_position: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "image": self.image,
            "size": self.size,
            "timestamp": self.timestamp,
            "encoding": self.encoding,
            "samples_submitted": self.samples_submitted,
            "first_position": self.first_position,
            "last_position": self.last_position,
        }
