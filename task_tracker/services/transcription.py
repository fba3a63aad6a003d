import base64
import binascii
import logging

from openai import OpenAIError

from task_tracker.services.ai_client import AIServiceError

logger = logging.getLogger(__name__)

DEFAULT_MIME = "audio/webm"

_EXTENSIONS = {
    "audio/webm": "webm",
    "audio/ogg": "ogg",
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/mpeg": "mp3",
    "audio/mp4": "m4a",
}


def split_data_url(payload: str) -> tuple[str, str]:
    """Return ``(mime_type, base64_body)`` for a data-URL or bare base64 string."""
    if "," not in payload:
        return DEFAULT_MIME, payload.strip()
    header, body = payload.split(",", 1)
    mime = header.strip()
    if mime.startswith("data:"):
        mime = mime[len("data:"):]
    mime = mime.split(";", 1)[0].strip() or DEFAULT_MIME
    return mime, body.strip()


def decode_audio(payload: str) -> tuple[bytes, str]:
    """Decode the audio payload; raises ValueError if it is not base64."""
    mime, body = split_data_url(payload)
    try:
        audio = base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError("Audio data is not valid base64") from exc
    if not audio:
        raise ValueError("Audio data is empty")
    return audio, mime


def transcribe_audio(client, payload: str, *, model: str) -> str:
    audio, mime = decode_audio(payload)
    filename = f"recording.{_EXTENSIONS.get(mime, 'webm')}"

    logger.info("Transcribing %d bytes of %s model=%s", len(audio), mime, model)
    try:
        result = client.audio.transcriptions.create(
            model=model,
            file=(filename, audio, mime),
        )
    except OpenAIError as exc:
        raise AIServiceError(f"Transcription request failed: {exc.__class__.__name__}") from exc

    text = getattr(result, "text", None)
    if text is None:
        raise AIServiceError("Transcription response has no text")
    return text
