"""Domain layer - topology entities, value objects and discovery services."""
