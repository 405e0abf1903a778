"""
Linode Client - API Clients.
"""

from .base import BaseAPIClient
from .linode import LinodeClient

__all__ = [
    "BaseAPIClient",
    "LinodeClient",
]
