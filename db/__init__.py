"""
db/ - Database Layer
====================
Handles the PostgreSQL connection pool and schema initialization for the
companies and jobs tables. Has no dependencies on the repositories above it.
"""
