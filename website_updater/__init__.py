"""Resolve customer websites and write them back to the directory service."""
