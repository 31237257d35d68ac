"""AEGIS: training-metadata submission and compliance inspection service."""

__version__ = "0.1.0"
