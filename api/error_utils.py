"""
JSON error responses for the EcoPilot admin API.
Every error body has the shape {"success": false, "error_code", "message"[, "details"]}.
"""

import logging
from flask import jsonify
from pydantic import ValidationError
from typing import Any, Optional

from exceptions import ConfigurationError, MalformedInputError, PersistenceError

# error code -> (default HTTP status, default message)
ERROR_CODES = {
    "VALIDATION_ERROR": (400, "Request validation failed"),
    "MALFORMED_INPUT": (400, "Input is missing a required field or has the wrong type"),
    "NO_RECIPIENT": (400, "User has no FCM token"),
    "NOT_FOUND": (404, "Resource not found"),
    "USER_NOT_FOUND": (404, "User not found"),
    "SERVER_ERROR": (500, "Internal server error"),
    "CONFIGURATION_ERROR": (500, "Content or milestone configuration is invalid"),
    "PERSISTENCE_ERROR": (503, "The notification could not be stored"),
}


def error_response(error_code: str, message: Optional[str] = None, details: Any = None,
                   status_code: Optional[int] = None) -> tuple:
    """
    Builds the (JSON response, status) pair for one of the ERROR_CODES.
    Unknown codes are reported as SERVER_ERROR.
    """
    if error_code not in ERROR_CODES:
        logging.warning(f"Unknown error code used: {error_code}")
        error_code = "SERVER_ERROR"

    default_status, default_message = ERROR_CODES[error_code]
    status = status_code or default_status
    body = {"success": False, "error_code": error_code, "message": message or default_message}
    if details:
        body["details"] = details

    log = logging.error if status >= 500 else logging.warning
    log(f"API Error [{error_code}]: {body['message']} - Status: {status}")
    return jsonify(body), status


def handle_exception(e: Exception, context: str = "API endpoint") -> tuple:
    """Response for an exception caught inside an endpoint."""
    if isinstance(e, PersistenceError):
        return error_response("PERSISTENCE_ERROR", str(e), details={"userId": e.user_id})

    logging.error(f"Unexpected error in {context}: {type(e).__name__} - {e}", exc_info=True)
    return error_response(
        "SERVER_ERROR",
        "An unexpected error occurred",
        details={"error_type": type(e).__name__, "error_message": str(e)},
    )


def register_error_handlers(app):
    """App-wide handlers for exceptions that escape the endpoints."""

    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        return error_response("VALIDATION_ERROR", details=e.errors(include_url=False, include_context=False))

    @app.errorhandler(MalformedInputError)
    def handle_malformed_input(e):
        return error_response("MALFORMED_INPUT", str(e))

    @app.errorhandler(ConfigurationError)
    def handle_configuration_error(e):
        logging.critical(f"Configuration error: {e}", exc_info=True)
        return error_response("CONFIGURATION_ERROR", str(e))

    @app.errorhandler(404)
    def resource_not_found(e):
        return error_response("NOT_FOUND", "The requested resource was not found.")

    @app.errorhandler(500)
    def internal_server_error(e):
        logging.critical(f"An unhandled exception occurred: {e}", exc_info=True)
        return error_response("SERVER_ERROR", "An unexpected error occurred on the server.")
