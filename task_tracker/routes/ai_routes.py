from flask import Blueprint, current_app, jsonify, request

from task_tracker.services.ai_client import AIServiceError, get_ai_client
from task_tracker.services.enhancement import enhance_text
from task_tracker.services.transcription import transcribe_audio


ai_bp = Blueprint("ai", __name__)


@ai_bp.post("/enhance")
def enhance():
    payload = request.get_json(silent=True) or {}
    text = payload.get("text")
    if not isinstance(text, str) or not text.strip():
        return jsonify(error="Text is required"), 400
    category = payload.get("category")
    if not isinstance(category, str):
        category = None

    try:
        enhanced = enhance_text(
            get_ai_client(),
            text,
            category,
            model=current_app.config["AI_CHAT_MODEL"],
            disable_thinking=current_app.config.get("AI_DISABLE_THINKING", True),
        )
    except AIServiceError:
        current_app.logger.exception("Error enhancing text")
        return jsonify(error="Failed to enhance text"), 500

    return jsonify(enhanced_text=enhanced, original_text=text), 200


@ai_bp.post("/transcribe")
def transcribe():
    payload = request.get_json(silent=True) or {}
    # Older clients send camelCase keys
    audio_data = payload.get("audio_data") or payload.get("audioData")
    if not isinstance(audio_data, str) or not audio_data.strip():
        return jsonify(error="Audio data is required"), 400

    try:
        text = transcribe_audio(
            get_ai_client(),
            audio_data,
            model=current_app.config["AI_TRANSCRIBE_MODEL"],
        )
    except ValueError as exc:
        return jsonify(error=str(exc)), 400
    except AIServiceError:
        current_app.logger.exception("Error transcribing audio")
        return jsonify(error="Failed to transcribe audio"), 500

    return jsonify(transcription=text), 200
