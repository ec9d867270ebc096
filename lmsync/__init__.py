"""
LMSync: local persistence layer for a learning-management-system sync client.
"""

__version__ = "1.0.0"
