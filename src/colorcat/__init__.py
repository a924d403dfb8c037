"""Generic colorizer for text streams driven by grc rule files."""

__version__ = "0.1.0"
