"""Analysis records produced by the response parsers."""
