"""
Store access module for the checkout service.

- ConnDB: connection and pool management
- repositories: raw-SQL repositories, one per table family
"""

from app.db.connection import ConnDB

__all__ = ["ConnDB"]
