"""Provision Python-family runtime environments from a declarative config."""

__version__ = "0.1.0"
