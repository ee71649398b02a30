"""
Shared, cross-cutting code for the API.

`core/` holds small building blocks that every feature uses (DB wiring,
settings, logging, error types). Feature-specific SQL and business rules
live in the feature package (e.g. `posts/`).
"""
