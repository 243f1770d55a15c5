"""Probabilistic decision tree engine: model, propagation and mutation service."""

__version__ = "0.1.0"
