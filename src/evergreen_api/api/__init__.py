"""HTTP API: routes, lifespan wiring and dependency accessors."""
