"""Infrastructure: adapters implementing the application ports."""
