"""Workflow use cases."""

from docflow.application.use_cases.workflow.workflow_engine import WorkflowEngine

__all__ = ["WorkflowEngine"]
