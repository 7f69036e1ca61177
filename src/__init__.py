"""Assurance detector source root."""
