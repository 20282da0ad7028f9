"""Users module: user accounts, sessions and user management routes."""
