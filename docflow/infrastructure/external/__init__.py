"""Adapters for systems outside the database."""
