"""Parsers package: shared errors and the npm ecosystem parsers."""
