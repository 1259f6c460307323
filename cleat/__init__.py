"""Cleat — one command surface for the everyday chores of a multi-service project."""

__version__ = "0.1.14"
