"""GitHub REST API access."""
