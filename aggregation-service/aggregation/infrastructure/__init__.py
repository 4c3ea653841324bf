"""Infrastructure layer for the Aggregation Service."""

__version__ = "0.1.0"

# Import main components for easier access
from aggregation.infrastructure.auth import JwtTokenHandler
from aggregation.infrastructure.cache import MemoryCache
from aggregation.infrastructure.http import ResilientHttpClient
