"""Packaged data files for the built-in game modes."""
