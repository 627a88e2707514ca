"""Catalog queries and payload validation."""
