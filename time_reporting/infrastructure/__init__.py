"""Infrastructure layer: persistence, authentication and web adapters."""
