"""Brand-safe content generation behind a quality and compliance gate."""

__version__ = "0.1.0"
