"""
Data models for the Nexus chat application.
"""
from .turn import Attachment, ModelType, Role, Turn

__all__ = ["Attachment", "ModelType", "Role", "Turn"]
