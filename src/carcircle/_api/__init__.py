"""Endpoint modules for the remote circle backend."""
