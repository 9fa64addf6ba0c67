"""ragbot: train on a web page or document, then answer questions about it."""

__version__ = "0.1.0"
