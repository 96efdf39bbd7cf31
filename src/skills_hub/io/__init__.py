"""I/O operations for skills-hub."""
