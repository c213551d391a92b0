"""Platform Checker - validate a dependency graph against a managed platform."""

__version__ = "0.1.0"
