"""
Sample Emitter

Walks a PixelGrid row by row and turns each pixel into a LabeledSample.
"""
import time
from typing import Iterator, Optional

from .encoders import DEFAULT_ENCODING, get_encoder
from .models import LabeledSample, PixelGrid, RunSummary
from .sink import Session


def current_millis() -> int:
    return int(time.time() * 1000)


def iter_samples(
    grid: PixelGrid,
    image_name: str,
    timestamp: int,
    encoding: str = DEFAULT_ENCODING
) -> Iterator[LabeledSample]:
    """
    Yield one sample per pixel in row-major order.

    Args:
        grid: Decoded image
        image_name: Value of the "image" dimension (usually the file name)
        timestamp: Capture time in ms, shared by every sample
        encoding: Position encoding name ("decimal" or "alpha")

    Yields:
        LabeledSample with image, size and position dimensions
    """
    if not image_name:
        raise ValueError("image_name must not be empty")
    encode = get_encoder(encoding)

    image = image_name
    size = grid.size_label
    total = grid.total
    width = grid.width

    for row in range(grid.height):
        for column in range(width):
            yield LabeledSample(
                value=grid.pixel(column, row),
                timestamp=timestamp,
                labels={
                    "image": image,
                    "size": size,
                    "position": encode(row * width + column, total),
                }
            )


def send_image(
    grid: PixelGrid,
    image_name: str,
    session: Session,
    timestamp: Optional[int] = None,
    encoding: str = DEFAULT_ENCODING
) -> RunSummary:
    """
    Stream every pixel of `grid` into `session`.

    The session is not closed here; the caller owns it. A TransmissionError
    from submit() stops the scan and propagates. Samples already sent stay
    sent.

    Returns:
        RunSummary describing what was submitted
    """
    if timestamp is None:
        timestamp = current_millis()

    summary = RunSummary(
        image=image_name,
        size=grid.size_label,
        timestamp=timestamp,
        encoding=encoding
    )

    for sample in iter_samples(grid, image_name, timestamp, encoding):
        session.submit(sample)
        if not summary.first_position:
            summary.first_position = sample.position
        summary.last_position = sample.position
        summary.samples_submitted += 1

    return summary
