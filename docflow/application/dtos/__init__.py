"""Application DTOs (frozen dataclasses; no ORM types)."""
