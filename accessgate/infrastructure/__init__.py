"""Infrastructure: persistence, cache, security, and seeding implementations."""
