"""
Services package for the Aggregation Service.

Services orchestrate application workflows, coordinating between domain
models and external adapters. They depend on the adapter abstractions rather
than concrete implementations.
"""

from aggregation.services.aggregation_service import AggregationService
