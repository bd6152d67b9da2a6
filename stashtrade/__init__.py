"""Path of Exile public stash parsing, diffing, sinks and trade offer search."""

__version__ = "0.1.0"