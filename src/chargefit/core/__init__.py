"""Core fitting engine, independent of any user interface."""
