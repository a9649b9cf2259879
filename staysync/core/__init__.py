"""Core infrastructure: exceptions, logging, middleware and security."""
