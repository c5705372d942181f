"""Browser session controller and its supporting pieces."""
