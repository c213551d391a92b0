"""Bundled catalogs for platform-checker."""
