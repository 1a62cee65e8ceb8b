"""Tasklist — multi-user task-list API.

Users register, log in for a signed session token, and manage their own
todo items. Everything is scoped to the authenticated user.
"""

__version__ = "0.1.0"
