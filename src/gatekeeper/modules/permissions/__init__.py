"""Permissions module: permission management routes."""
