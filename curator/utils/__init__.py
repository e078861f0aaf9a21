"""Normalizers, settings and credential helpers."""
