"""In-process metrics for the analysis layer."""
