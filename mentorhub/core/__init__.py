"""Auth, security and cross-cutting utilities."""
