"""Domain layer: entities, workflow, domain services and repository ports."""
