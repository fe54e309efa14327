"""agent-relay: keep AI coding tools' configs in sync with one canonical set of resources."""

__version__ = "0.1.0"
