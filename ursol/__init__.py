"""URSOL insurance backend."""
