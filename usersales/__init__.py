"""In-memory users and sales services with Flask HTTP front ends."""

__version__ = "0.1.0"