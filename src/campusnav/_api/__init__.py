"""Endpoint modules for the external HTTP providers."""
