"""Shared infrastructure: diagnostics, configuration, HTTP and storage capabilities."""
