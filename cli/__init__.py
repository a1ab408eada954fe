"""Interactive terminal client for the WikiChat API."""
