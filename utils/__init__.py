"""
utils/ - Shared Helpers
=======================
Logging, the error taxonomy, and the SQL clause builders used by repositories.
Nothing in here touches the database directly.
"""
