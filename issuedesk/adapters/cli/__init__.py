"""Command-line interface adapters.

Provides desk commands for the IssueDesk system:
- issuable / pick: Report available copies
- issue / return: Lend and take back copies
- due / fee / overdue: Loan deadlines and late fees
- add-item / add-copy / add-member / inventory: Catalog maintenance
"""
