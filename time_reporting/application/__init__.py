"""Application layer: DTOs and use cases orchestrating the domain."""
