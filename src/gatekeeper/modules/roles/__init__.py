"""Roles module: role management and role-permission links."""
