"""Packaged catalog files."""
