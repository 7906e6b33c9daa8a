"""Customer-operations access control and inquiry routing core."""
