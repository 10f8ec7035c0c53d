"""
Bookkeeping Dashboard

Sales and cost entry, daily/period reporting, exports and role-based
user management for a small business.
"""

__version__ = "1.0.0"
