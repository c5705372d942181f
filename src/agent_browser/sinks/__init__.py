"""Consumers of browser action results."""
