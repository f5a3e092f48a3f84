"""Service layer: authentication and input validation."""
