"""Fake implementations of core ports for testing.

These in-memory implementations allow core domain logic to be tested
without external dependencies:

- FakeAccessionRecordStorePort: Canned accession record list
- FakeIssuedItemStorePort: In-memory loan persistence with call tracking
- FakeCatalogStorePort: In-memory items and members
- FakeCirculationPort: Captured desk operations for CLI tests
- FakeCatalogPort: Captured catalog operations for CLI tests
"""

from .desk import FakeCatalogPort, FakeCirculationPort
from .store import (
    FakeAccessionRecordStorePort,
    FakeCatalogStorePort,
    FakeIssuedItemStorePort,
)

__all__ = [
    "FakeAccessionRecordStorePort",
    "FakeCatalogPort",
    "FakeCatalogStorePort",
    "FakeCirculationPort",
    "FakeIssuedItemStorePort",
]
