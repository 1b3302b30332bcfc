"""
repositories/ - Data Access Layer
==================================
Each repository encapsulates all SQL queries for one resource.
Repositories receive raw rows from the database and return domain model objects.
"""
