"""
Custom UI widgets for the Nexus chat application.
"""
from .input_area import InputArea, parse_command
from .chat_log import ChatLog
from .message_bubble import MessageBubble

__all__ = ["InputArea", "ChatLog", "MessageBubble", "parse_command"]
