import logging
from typing import Dict, Type, List, Optional

from aggregation.adapters.interfaces.external_api import ExternalSourceAdapter

logger = logging.getLogger(__name__)


class AdaptorRegistry:
    """
    Registry of available source adapter implementations.
    Maps source names to their implementing classes.
    """

    def __init__(self):
        """
        Initialize an empty adaptor registry.
        """
        self._adaptors: Dict[str, Type[ExternalSourceAdapter]] = {}
        logger.debug("Initialized AdaptorRegistry")

    def register(self, source: str, adaptor_class: Type[ExternalSourceAdapter]) -> None:
        """
        Register an adaptor implementation.

        Args:
            source: Source name for the adaptor
            adaptor_class: Class to instantiate for this source

        Raises:
            ValueError: If the source is invalid or already registered
        """
        if not source or not isinstance(source, str):
            raise ValueError("Source name must be a non-empty string")

        if not isinstance(adaptor_class, type) or not issubclass(adaptor_class, ExternalSourceAdapter):
            raise ValueError(
                "Adaptor class must be a subclass of ExternalSourceAdapter"
            )

        if source in self._adaptors:
            raise ValueError(f"Source '{source}' is already registered")

        self._adaptors[source] = adaptor_class
        logger.info(f"Registered adaptor for source: {source}")

    def get(self, source: str) -> Optional[Type[ExternalSourceAdapter]]:
        """
        Retrieve an adaptor implementation by source name.

        Returns:
            The adaptor class if found, None otherwise
        """
        return self._adaptors.get(source)

    def list(self) -> List[str]:
        """
        List all registered source names.
        """
        return list(self._adaptors.keys())

    def is_registered(self, source: str) -> bool:
        return source in self._adaptors
