"""Building blocks for backend services: configuration, serialization, request tracing, validation and version checks."""

__version__ = "1.0.1"