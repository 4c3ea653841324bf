"""
Interfaces package for the Aggregation Service.

This package contains all abstract base interfaces used by the aggregation
service to standardize interactions with external APIs.
"""

# Export all interfaces for easier imports
from .external_api import ExternalSourceAdapter
from .connector import APIConnector, RequestConfig, TransportResponse
from .cache import CacheStrategy

# Make these interfaces available when importing from the package
__all__ = [
    # External API interface
    'ExternalSourceAdapter',

    # Connector interface
    'APIConnector',
    'RequestConfig',
    'TransportResponse',

    # Cache interface
    'CacheStrategy',
]
