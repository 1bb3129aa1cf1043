"""MyCosmo – astronomy content aggregator and personal observation log."""

__version__ = "0.1.0"
