"""docflow: document approval workflow service."""
