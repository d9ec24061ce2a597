"""Packaged default configuration and rule tables."""
