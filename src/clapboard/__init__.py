"""clapboard: clipboard history with an external picker."""

__version__ = "0.2.0"
