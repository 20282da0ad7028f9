"""Gatekeeper: role-based access control for a REST API."""

__version__ = "0.1.0"
