"""Application services used by the workflow and document use cases."""

from docflow.application.services.assignment_tracker import AssignmentTracker
from docflow.application.services.document_number import DocumentNumberGenerator
from docflow.application.services.permission_evaluator import PermissionEvaluator
from docflow.application.services.version_manager import VersionManager

__all__ = [
    "AssignmentTracker",
    "DocumentNumberGenerator",
    "PermissionEvaluator",
    "VersionManager",
]
