"""Inventory items with in-memory and MySQL storage, and a greeting web app."""

__version__ = "0.1.0"