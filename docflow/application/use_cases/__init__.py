"""Application use cases (documents, workflow, effects)."""
