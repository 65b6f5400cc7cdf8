"""libalibe command line interface."""

from libalibe.cli.app import app, main

__all__ = ["app", "main"]
