"""Infrastructure — database sessions, repository implementations, logging."""
