"""Line-by-line driver between a byte stream and the rule engine."""

from __future__ import annotations

import logging
from typing import BinaryIO

from colorcat.core.engine import RuleEngine

logger = logging.getLogger(__name__)

LINE_TERMINATORS = (b"\r\n", b"\n")


def split_line(raw: bytes) -> tuple[bytes, bytes]:
    """Split a raw line into its body and its terminator."""
    for terminator in LINE_TERMINATORS:
        if raw.endswith(terminator):
            return raw[: -len(terminator)], terminator
    return raw, b""


def colorize_stream(
    engine: RuleEngine,
    source: BinaryIO,
    sink: BinaryIO,
    encoding: str = "utf-8",
) -> int:
    """Recolor every line of source into sink.

    Lines that cannot be decoded are written unchanged and never reach the
    engine. Each output line is flushed before the next one is read.

    Args:
        engine: Rule engine holding the parsed rules
        source: Binary input stream
        sink: Binary output stream
        encoding: Text encoding of the input

    Returns:
        Number of lines written
    """
    written = 0

    for lineno, raw in enumerate(source, start=1):
        body, terminator = split_line(raw)

        try:
            text = body.decode(encoding)
        except UnicodeDecodeError as e:
            logger.debug("Line %d passed through undecoded: %s", lineno, e)
            sink.write(raw)
            sink.flush()
            written += 1
            continue

        result = engine.process(text)
        if result is None:
            continue

        sink.write(result.encode(encoding) + terminator)
        sink.flush()
        written += 1

    return written
