"""Tecfag I.A. retrieval-augmented answering pipeline."""

__version__ = "0.1.0"
