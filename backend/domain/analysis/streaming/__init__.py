"""Pseudo-SSE stream handling for the analysis endpoint."""
