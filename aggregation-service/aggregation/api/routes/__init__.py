"""HTTP routers exposed by the Aggregation Service."""
