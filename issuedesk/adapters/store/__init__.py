"""Library store adapters for persistence and querying.

Implementations support multiple backends:
- In-memory (no persistence, useful for demos and tests)
- SQLite (zero-config, single-file)
"""
