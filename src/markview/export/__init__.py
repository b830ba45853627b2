"""Serialization of parsed documents."""
