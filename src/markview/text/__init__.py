"""Styling and geometry for laying out rendered paragraphs."""
