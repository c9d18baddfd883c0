"""Domain layer: entities and collaborator interfaces."""
