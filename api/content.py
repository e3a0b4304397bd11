import logging
from flask import Blueprint, request, jsonify

import daily_selector
import jobs
from content_pool import TIP_POOL, pool_stats
from dependencies import get_current_services
from extensions import GENERATE_LIMIT, limiter
from timezone_utils import get_current_utc_date, parse_date_string
from .error_utils import handle_exception
from .pydantic_models import TipGenerationQuery

content_bp = Blueprint('content_bp', __name__)


def _challenges_response(selection):
    return {
        "success": True,
        "date": selection.date,
        "challenges": [entry.to_challenge_document() for entry in selection.entries],
    }


@content_bp.route('/challenges/generate', methods=['POST'])
@limiter.limit(GENERATE_LIMIT)
def manual_generate_challenges():
    """Generates and stores the challenges for ?date=YYYY-MM-DD (default: today, UTC)."""
    day = parse_date_string(request.args.get('date'), default=get_current_utc_date())
    try:
        selection = jobs.store_daily_challenges(get_current_services(), day)
    except Exception as e:
        return handle_exception(e, "manual_generate_challenges endpoint")
    return jsonify(_challenges_response(selection)), 200


@content_bp.route('/challenges/preview', methods=['GET'])
def preview_challenges():
    """Recomputes the challenges for a date without touching Firestore."""
    day = parse_date_string(request.args.get('date'), default=get_current_utc_date())
    selection = daily_selector.generate_daily_challenges(day)
    return jsonify(_challenges_response(selection)), 200


@content_bp.route('/tips/generate', methods=['POST'])
@limiter.limit(GENERATE_LIMIT)
def manual_generate_tips():
    query = TipGenerationQuery.model_validate(request.args.to_dict())
    start = parse_date_string(query.start, default=get_current_utc_date())
    try:
        results = jobs.store_daily_tips(get_current_services(), start, query.days)
    except Exception as e:
        logging.error(f"Error in manual tip generation: {e}")
        return handle_exception(e, "manual_generate_tips endpoint")

    return jsonify({
        "success": True,
        "message": f"Generated {query.days} daily tips",
        "tips": [
            {"date": r.date, "tip": r.entries[0].title, "category": r.entries[0].category}
            for r in results
        ],
    }), 200


@content_bp.route('/tips', methods=['GET'])
def get_all_tips():
    """Pool statistics and contents, for debugging."""
    return jsonify({"success": True, "stats": pool_stats(TIP_POOL), "tipPool": TIP_POOL}), 200
