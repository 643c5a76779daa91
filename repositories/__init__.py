"""
repositories/ - Data Access Layer
==================================
Each repository encapsulates all SQL queries for one table (or view).
Repositories receive raw rows from the database and return domain model objects.
Write methods accept an optional cursor so several of them can share one transaction.
"""
