"""
Image decoding.

Turns an image file into a PixelGrid of packed RGB integers using Pillow.
Anything Pillow can open is accepted; alpha and palette data are dropped by
converting to RGB first.
"""
from pathlib import Path
from typing import Union

from PIL import Image, UnidentifiedImageError

from .errors import DecodeError
from .models import PixelGrid


def pack_rgb(r: int, g: int, b: int) -> int:
    """Pack 8-bit channels into a single 0xRRGGBB integer."""
    return ((r & 0xFF) << 16) | ((g & 0xFF) << 8) | (b & 0xFF)


def grid_from_image(img: Image.Image) -> PixelGrid:
    """Convert an already opened Pillow image into a PixelGrid."""
    rgb = img if img.mode == "RGB" else img.convert("RGB")
    width, height = rgb.size
    # Raw RGB data is 3 bytes per pixel, row-major
    data = rgb.tobytes()
    pixels = [pack_rgb(data[i], data[i + 1], data[i + 2]) for i in range(0, len(data), 3)]
    rows = tuple(
        tuple(pixels[row * width:(row + 1) * width])
        for row in range(height)
    )
    return PixelGrid(width=width, height=height, rows=rows)


def decode(path: Union[str, Path]) -> PixelGrid:
    """
    Decode an image file into a PixelGrid.

    Args:
        path: Image file path

    Returns:
        PixelGrid with one packed RGB value per pixel

    Raises:
        FileNotFoundError: path does not exist
        DecodeError: file is unreadable, corrupt or not an image
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File {path.resolve()} does not exist.")

    try:
        with Image.open(path) as img:
            img.load()
            return grid_from_image(img)
    except UnidentifiedImageError:
        raise DecodeError(path.name, "unsupported or unrecognized image format") from None
    except (OSError, ValueError, SyntaxError, EOFError, Image.DecompressionBombError) as e:
        raise DecodeError(path.name, str(e)) from e
