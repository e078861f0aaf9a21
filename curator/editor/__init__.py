"""Canonical editor model: entries, mapping, gates and serialization."""
