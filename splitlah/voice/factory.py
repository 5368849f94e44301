from splitlah import config
from splitlah.voice.base import VoiceInterpreter
from splitlah.voice.openai_provider import OpenAIVoiceInterpreter


def get_voice_interpreter() -> VoiceInterpreter:
    """Return the configured voice command provider."""
    provider = config.AI_PROVIDER
    if provider == "openai":
        return OpenAIVoiceInterpreter()
    raise ValueError(f"Unknown voice provider: {provider}")
