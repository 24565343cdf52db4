"""Enumerate EC2 instance types and report how many survive the exclude list."""

__version__ = "0.1.0"
