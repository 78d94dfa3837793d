"""Label-driven extraction of fields from free-text analyses."""
