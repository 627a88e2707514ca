"""Catalog storage, store and instrumentation."""
