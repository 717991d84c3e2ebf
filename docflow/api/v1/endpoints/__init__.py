"""API v1 endpoint modules (one APIRouter each)."""
