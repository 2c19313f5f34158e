from flask import request, jsonify
from flask_login import login_required

from services.assistant_service import AssistantService
from api.utils.errors import error_response
from api.utils.permissions import require_roles
from . import api_bp


@api_bp.get("/assistant/prompts")
@login_required
@require_roles("ADMIN", "EDITOR")
def assistant_prompts():
    return jsonify({
        "modes": list(AssistantService.MODES),
        "prompts": AssistantService.PREDEFINED_PROMPTS,
    })


@api_bp.post("/assistant/draft")
@login_required
@require_roles("ADMIN", "EDITOR")
def assistant_draft():
    """
    Single request/response relay to the text generator.
    Errors come back as placeholder text with 200, never as a failure.
    """
    data = request.get_json(silent=True) or {}
    prompt = (data.get("prompt") or "").strip()
    mode = (data.get("mode") or "announcement").strip().lower()

    if not prompt:
        return error_response("Write a prompt first.", 400, "incomplete_form")
    if mode not in AssistantService.MODES:
        return error_response("mode must be 'announcement' or 'general'.", 400, "validation_error")

    return jsonify(AssistantService.draft(prompt, mode))
