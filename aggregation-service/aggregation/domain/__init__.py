"""
Domain package for the Aggregation Service.

This package contains the response envelopes and the normalized source
records. The domain layer is independent of external systems and frameworks.
"""
