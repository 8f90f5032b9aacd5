"""Domain layer: models, repository interfaces, services and ML components."""
