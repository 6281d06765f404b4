"""External adapters for the IssueDesk circulation system.

This package contains all external dependencies (SQLite, terminal I/O)
and provides implementations of the core port interfaces.

Adapter Organization:

- store/: Adapters for catalog and loan persistence (in-memory, SQLite)
- cli/: Command-line interface and desk commands
"""
