from agents import Agent, Runner
from openai import AsyncOpenAI

from splitlah import config
from splitlah.errors import VoiceProcessingFailed
from splitlah.voice.base import VoiceContext, VoiceUpdateResult

INSTRUCTIONS = """\
You are a bill splitting assistant. You receive the current state of a restaurant bill (people and items, with who is currently assigned to each item) and a spoken command from the user.

Rules:
1. Interpret the command semantically and work out the new assignment of each item.
2. If a person is removed from an item (e.g. "Bob didn't drink the coffee"), the item stays with the REMAINING people already assigned to it, so its full cost is redistributed to them.
3. Never leave an item with nobody assigned unless the user explicitly says no one had it.
4. "Split evenly" means every item is assigned to every person.
5. "Split evenly but X didn't have Y" means Y is assigned to everyone except X, and every other item to everyone.
6. Use only the person ids and item ids from the current state.
7. Return "updates": one entry per item whose assignment changes, with its itemId and the NEW complete assignedTo list of person ids.
8. Leave out items whose assignment does not change."""

agent = Agent(
    name="Bill Split Assistant",
    instructions=INSTRUCTIONS,
    model=config.VOICE_MODEL,
    output_type=VoiceUpdateResult,
)

AUDIO_EXTENSIONS = {
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/webm": "webm",
    "audio/ogg": "ogg",
    "audio/mpeg": "mp3",
    "audio/mp4": "m4a",
    "audio/m4a": "m4a",
    "audio/x-m4a": "m4a",
}


def audio_filename(content_type: str) -> str:
    """Transcription infers the codec from the file extension."""
    media_type = content_type.split(";")[0].strip().lower()
    return f"command.{AUDIO_EXTENSIONS.get(media_type, 'wav')}"


class OpenAIVoiceInterpreter:
    """Voice commands via OpenAI: transcribe the clip, then resolve it against the bill with an agent."""

    def __init__(self, client: AsyncOpenAI | None = None):
        self._client = client

    async def interpret(self, context: VoiceContext, audio_bytes: bytes, content_type: str) -> VoiceUpdateResult:
        client = self._client or AsyncOpenAI()
        transcription = await client.audio.transcriptions.create(
            model=config.TRANSCRIBE_MODEL,
            file=(audio_filename(content_type), audio_bytes, content_type),
        )
        command = (transcription.text or "").strip()
        if not command:
            raise VoiceProcessingFailed("No speech detected in the recording")

        result = await Runner.run(
            agent,
            input=[
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "input_text",
                            "text": (
                                "Current state:\n"
                                f"{context.model_dump_json(by_alias=True, indent=2)}\n\n"
                                f"Voice command: {command}"
                            ),
                        },
                    ],
                }
            ],
        )

        return result.final_output
