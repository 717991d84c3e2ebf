"""Domain layer: entities, enums, value objects and exceptions."""
