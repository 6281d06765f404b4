"""IssueDesk: library circulation desk service.

Tracks catalog items, their physical copies (accession records),
members and loans, and computes availability, due dates and late fees.
"""
