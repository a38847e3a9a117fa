"""
Settings read from the environment (and a local .env file).
"""
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from models import ModelType

DEFAULT_SYSTEM_INSTRUCTION = "You are a helpful, witty, and concise AI assistant named Nexus."

_API_KEY_VARS = ('GEMINI_API_KEY', 'GOOGLE_API_KEY', 'API_KEY')


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str] = None
    model: str = ModelType.FLASH.value
    system_instruction: str = DEFAULT_SYSTEM_INSTRUCTION
    log_level: str = 'INFO'


def load_settings(dotenv: bool = True) -> Settings:
    if dotenv:
        load_dotenv()

    api_key = next((os.environ[v] for v in _API_KEY_VARS if os.environ.get(v)), None)
    return Settings(
        api_key=api_key,
        model=os.environ.get('NEXUS_MODEL') or ModelType.FLASH.value,
        system_instruction=os.environ.get('NEXUS_SYSTEM_INSTRUCTION') or DEFAULT_SYSTEM_INSTRUCTION,
        log_level=(os.environ.get('NEXUS_LOG_LEVEL') or 'INFO').upper(),
    )
