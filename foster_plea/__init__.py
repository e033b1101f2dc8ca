"""Drafts foster plea emails from the foster-care spreadsheet."""

__all__ = [
    "config",
    "models",
    "sheet_client",
    "email_formatter",
    "drafter",
    "orchestrator",
]
