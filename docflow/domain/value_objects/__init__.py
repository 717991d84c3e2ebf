"""Domain value objects."""

from docflow.domain.value_objects.core import DocumentNumber, IdentityContext

__all__ = ["DocumentNumber", "IdentityContext"]
