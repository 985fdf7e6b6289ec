"""
CallHub server package.
Backend API for user accounts and call lifecycle management.
"""

__version__ = "1.0.0"
