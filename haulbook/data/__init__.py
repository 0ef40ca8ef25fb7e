"""
Records and their persistence.

- models: Load, Expense and reporting windows
- store: JSON record file, export/import and backup reminders
"""
