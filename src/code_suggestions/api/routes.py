# src/code_suggestions/api/routes.py
import logging

from pydantic import ValidationError
from quart import Blueprint, current_app, jsonify, request

from code_suggestions.api.models import CompletionRequest
from code_suggestions.core.config import (
    CURSOR_MISSING_MESSAGE,
    GENERATION_FAILED_MESSAGE,
    INVALID_REQUEST_MESSAGE,
)
from code_suggestions.completion.exceptions import MissingCursorMarkerError

api_bp = Blueprint('api', __name__)
app_logger = logging.getLogger("quart.app")

SERVICE_EXTENSION_KEY = "completion_service"


def _get_completion_service():
    return current_app.extensions[SERVICE_EXTENSION_KEY]


@api_bp.route("/complete", methods=["POST"])
async def complete():
    """
    Returns an inline suggestion for the cursor position in `context_text`.

    Responses:
        200 {"text": "<suggestion>"}  (or {"text": "in process"} while another call runs)
        400 {"error": "Cursor marker missing."}
        500 {"error": "Failed to generate AI suggestion."}
    """
    data = await request.get_json(silent=True)
    try:
        completion_request = CompletionRequest.model_validate(data if data is not None else {})
    except ValidationError as e:
        app_logger.warning(f"Rejected completion request with invalid body: {e.errors()}")
        return jsonify({"error": INVALID_REQUEST_MESSAGE}), 400

    service = _get_completion_service()
    try:
        outcome = await service.complete(
            completion_request.context_text,
            language_id=completion_request.language_id,
        )
    except MissingCursorMarkerError:
        app_logger.error("Error: CURSOR_MARKER not found.")
        return jsonify({"error": CURSOR_MISSING_MESSAGE}), 400
    except Exception as e:
        app_logger.error(f"AI model generation failed: {e}", exc_info=True)
        return jsonify({"error": GENERATION_FAILED_MESSAGE}), 500

    return jsonify({"text": outcome.text})


@api_bp.route("/api/status")
async def get_application_status():
    """
    Returns the model, template and gate state so the editor can show
    whether a completion is currently running.
    """
    service = _get_completion_service()
    return jsonify({
        "model": service.config.MODEL_NAME,
        "template": service.template.name,
        "contextLimit": service.config.CONTEXT_LIMIT,
        "gate": service.gate.state.value,
    })
