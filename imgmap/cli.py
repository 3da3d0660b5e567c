#!/usr/bin/env python3
"""
CLI for imgmap.

Sends every pixel of an image to the metric ingest endpoint so a heat-map
chart can draw it.

Usage:
    imgmap picture.png
    python -m imgmap.cli picture.png

Configuration comes from IMGMAP_* environment variables, a .env file or
~/.imgmap/config.json (see imgmap.config).
"""
import argparse
import json
import sys
import traceback
from pathlib import Path
from typing import Callable, List, Optional

from .config import SinkConfig
from .emitter import send_image
from .errors import ArgumentError, ImgMapError
from .image import decode
from .models import RunSummary
from .sink import MetricSink, SignalFxSink


def get_image_file(path: Optional[str]) -> Path:
    """Validate the positional argument and return the image path."""
    if not path:
        raise ArgumentError("Missing file name.")
    image_file = Path(path)
    if not image_file.exists():
        raise FileNotFoundError(f"File {image_file.resolve()} does not exist.")
    return image_file


def run(
    image_path: str,
    config: Optional[SinkConfig] = None,
    sink_factory: Optional[Callable[[SinkConfig], MetricSink]] = None
) -> RunSummary:
    """
    Decode an image and send it through a sink session.

    Args:
        image_path: Path to the image file
        config: Sink configuration (loaded from the environment if None)
        sink_factory: Builds the sink from the config

    Returns:
        RunSummary for the completed run
    """
    image_file = get_image_file(image_path)
    grid = decode(image_file)

    config = config or SinkConfig.load()
    sink = (sink_factory or SignalFxSink)(config)

    with sink.create_session() as session:
        return send_image(
            grid,
            image_file.name,
            session,
            encoding=config.position_encoding
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="imgmap",
        description="Send an image to a metrics backend, one datapoint per pixel"
    )
    parser.add_argument(
        "image",
        nargs="?",
        help="Path to the image file"
    )
    return parser


def main(argv: Optional[List[str]] = None):
    args = build_parser().parse_args(argv)
    config = None

    try:
        image_file = get_image_file(args.image)
        config = SinkConfig.load()
        if config.debug:
            print(f"[imgmap] Config: {json.dumps(config.to_dict())}", file=sys.stderr)
        summary = run(str(image_file), config=config)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except ImgMapError as e:
        print(f"Error: {e}", file=sys.stderr)
        if config is not None and config.debug:
            traceback.print_exc()
        sys.exit(1)
    except Exception as e:
        print(f"Error: Unexpected failure: {e}", file=sys.stderr)
        if config is not None and config.debug:
            traceback.print_exc()
        sys.exit(1)

    print(
        f"Sent {summary.samples_submitted} datapoints for {summary.image} "
        f"({summary.size}, positions {summary.first_position}..{summary.last_position})"
    )
    if config.debug:
        print(f"[imgmap] Summary: {json.dumps(summary.to_dict())}", file=sys.stderr)


if __name__ == "__main__":
    main()
