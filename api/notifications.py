# FILE: ecopilot-backend/api/notifications.py

import logging
from flask import Blueprint, request, jsonify

import jobs
import triggers
from dependencies import get_current_services
from extensions import BROADCAST_LIMIT, STREAK_CHECK_LIMIT, limiter
from timezone_utils import get_current_utc_date
from .error_utils import error_response, handle_exception
from .pydantic_models import BroadcastRequest, ReplayRequest, StreakCheckRequest

notifications_bp = Blueprint('notifications_bp', __name__)


@notifications_bp.route('/streak-check', methods=['POST'])
@limiter.limit(STREAK_CHECK_LIMIT)
def manual_streak_check():
    """Sends one user today's streak warning unless they already completed their challenges."""
    req_data = StreakCheckRequest.model_validate({"userId": request.args.get('userId') or ""})
    services = get_current_services()

    user = jobs.load_user(services, req_data.userId)
    if user is None:
        return error_response("USER_NOT_FOUND")
    if not user.fcmToken:
        return error_response("NO_RECIPIENT")

    try:
        result = jobs.check_user_streak(services, user, get_current_utc_date())
    except Exception as e:
        return handle_exception(e, "manual_streak_check endpoint")
    return jsonify({"success": True, **result}), 200


@notifications_bp.route('/broadcast', methods=['POST'])
@limiter.limit(BROADCAST_LIMIT)
def broadcast():
    req_data = BroadcastRequest.model_validate(request.get_json(silent=True) or {})
    try:
        outcomes = jobs.send_broadcast(get_current_services(), req_data.title, req_data.body, req_data.category)
    except Exception as e:
        return handle_exception(e, "broadcast endpoint")
    return jsonify({
        "success": True,
        "sentTo": len(outcomes),
        "pushed": sum(1 for o in outcomes if o.pushed),
        "failed": [o.userId for o in outcomes if not o.ok],
    }), 200


@notifications_bp.route('/replay', methods=['POST'])
def replay_user_update():
    """
    Runs the user-update detectors on an arbitrary before/after pair.
    With dryRun (the default) the built notifications are returned and nothing is stored or sent.
    """
    req_data = ReplayRequest.model_validate(request.get_json(silent=True) or {})
    events = triggers.detect_user_events(req_data.userId, req_data.before, req_data.after)
    response = {
        "success": True,
        "userId": req_data.userId,
        "events": [event.model_dump() for event in events],
    }
    if req_data.dryRun:
        return jsonify(response), 200

    try:
        outcomes = triggers.handle_user_updated(get_current_services(), req_data.userId, req_data.before, req_data.after)
    except Exception as e:
        logging.error(f"Replay delivery failed for user {req_data.userId}: {e}")
        return handle_exception(e, "replay_user_update endpoint")
    response["outcomes"] = [o.model_dump() for o in outcomes]
    return jsonify(response), 200

