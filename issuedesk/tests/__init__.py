"""Test suite for the IssueDesk circulation system.

Organized into three categories:

1. core/: Unit tests for core domain logic
   - Minimal dependencies, fast execution
   - Uses in-memory fakes for ports

2. adapters/: Integration tests for adapter implementations
   - In-memory and SQLite stores, CLI command handler

3. fakes/: Port implementations for testing
   - In-memory implementations of the store ports and driving ports
   - Used by core unit tests
"""
