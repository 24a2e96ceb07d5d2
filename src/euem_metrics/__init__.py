"""Citrix EUEM endpoint metrics collector."""

__version__ = "0.1.0"
