import pytest

from core.client import GenAIClient, create_client
from core.config import DEFAULT_SYSTEM_INSTRUCTION, Settings, load_settings
from core.errors import ConfigError


@pytest.fixture
def clean_env(monkeypatch):
    for var in ('GEMINI_API_KEY', 'GOOGLE_API_KEY', 'API_KEY', 'NEXUS_MODEL',
                'NEXUS_SYSTEM_INSTRUCTION', 'NEXUS_LOG_LEVEL'):
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = load_settings(dotenv=False)

    assert settings.api_key is None
    assert settings.model == 'gemini-2.5-flash'
    assert settings.system_instruction == DEFAULT_SYSTEM_INSTRUCTION
    assert settings.log_level == 'INFO'


def test_reads_environment(clean_env):
    clean_env.setenv('API_KEY', 'fallback')
    clean_env.setenv('GEMINI_API_KEY', 'primary')
    clean_env.setenv('NEXUS_MODEL', 'gemini-3-pro-preview')
    clean_env.setenv('NEXUS_LOG_LEVEL', 'debug')

    settings = load_settings(dotenv=False)

    assert settings.api_key == 'primary'
    assert settings.model == 'gemini-3-pro-preview'
    assert settings.log_level == 'DEBUG'


def test_create_client_requires_a_key():
    with pytest.raises(ConfigError):
        create_client(Settings())


def test_create_client_with_key():
    client = create_client(Settings(api_key='test-key'))
    assert isinstance(client, GenAIClient)
