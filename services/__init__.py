from .ai_client import AIClient, AIUnavailableError
from .assistant_service import AssistantService
from .schema_capabilities import SchemaCapabilities
from . import grading_rules

__all__ = [
    "AIClient",
    "AIUnavailableError",
    "AssistantService",
    "SchemaCapabilities",
    "grading_rules",
]
