"""Runtime layer: retry policy, cursor pagination and the REST transport."""
