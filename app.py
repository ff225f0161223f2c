from __future__ import annotations

import logging
import time
import traceback
from datetime import datetime, timezone
from typing import Any, Optional

from flask import Blueprint, Flask, current_app, g, jsonify, request
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from werkzeug.exceptions import HTTPException

import validation
from errors import ParkingLotError, RequestValidationError
from log_setup import configure_logging
from models import LotSummary
from parking_lot import ParkingLot
from settings import Settings, load_settings

logger = logging.getLogger(__name__)

api = Blueprint("api", __name__)

# helmet() defaults
SECURITY_HEADERS = {
    "Content-Security-Policy": (
        "default-src 'self';base-uri 'self';font-src 'self' https: data:;"
        "form-action 'self';frame-ancestors 'self';img-src 'self' data:;"
        "object-src 'none';script-src 'self';script-src-attr 'none';"
        "style-src 'self' https: 'unsafe-inline';upgrade-insecure-requests"
    ),
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Origin-Agent-Cluster": "?1",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Frame-Options": "SAMEORIGIN",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "0",
}


# -------------------------
# Helpers
# -------------------------
def get_lot() -> ParkingLot:
    return current_app.extensions["parking_lot"]


def get_settings() -> Settings:
    return current_app.extensions["parking_settings"]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _json_body() -> dict[str, Any]:
    # non-JSON or non-object bodies behave like an empty object
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def _error(message: str, status: int, **extra: Any):
    return jsonify({"success": False, "error": message, **extra}), status


# -------------------------
# API routes
# -------------------------
@api.route("/create-lot", methods=["POST"])
def create_lot():
    body = _json_body()
    validation.require_fields(body, ["capacity"])
    capacity = validation.numeric_field("capacity", body["capacity"], 1, get_settings().max_capacity)

    message = get_lot().create_lot(capacity)
    return jsonify({"success": True, "message": message, "data": {"capacity": capacity}}), 201


@api.route("/park", methods=["POST"])
def park():
    body = _json_body()
    validation.require_fields(body, ["carId"])
    car_id = validation.car_registration(body["carId"], get_settings().car_id_pattern)

    slot_number = get_lot().park_car(car_id)
    return jsonify({
        "success": True,
        "message": f"Allocated slot number: {slot_number}",
        "data": {"slotNumber": slot_number, "carId": car_id},
    }), 200


@api.route("/unpark/<slot_number>", methods=["DELETE"])
def unpark(slot_number: str):
    number = validation.numeric_field("slotNumber", slot_number, 1, get_settings().max_capacity)

    message = get_lot().unpark_car(number)
    return jsonify({"success": True, "message": message, "data": {"slotNumber": number}}), 200


@api.route("/status", methods=["GET"])
def status():
    slots = get_lot().get_status()
    summary = LotSummary.from_slots(slots)

    logger.info(
        "Parking Lot Operation: get-status",
        extra={"totalSlots": summary.total_slots, "occupiedSlots": summary.occupied_slots},
    )
    return jsonify({
        "success": True,
        "data": [s.to_dict() for s in slots],
        "summary": summary.to_dict(),
    }), 200


@api.route("/health", methods=["GET"])
def api_health():
    return jsonify({
        "success": True,
        "service": "parking-lot-api",
        "status": "healthy",
        "timestamp": _now(),
    }), 200


# -------------------------
# Error handlers
# -------------------------
def _handle_domain_error(exc: ParkingLotError | RequestValidationError):
    return _error(exc.message, 400)


def _handle_http_error(exc: HTTPException):
    if exc.code == 404:
        return _error(f"Route {request.path} not found", 404)
    if exc.code == 429:
        return _error("Too many requests, please try again later.", 429)
    return _error(exc.description or exc.name, exc.code or 500)


def _handle_unexpected(exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.path)
    if get_settings().debug:
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        return _error("Internal Server Error", 500, stack=stack)
    return _error("Internal Server Error", 500)


# -------------------------
# App factory
# -------------------------
def create_app(settings: Optional[Settings] = None, lot: Optional[ParkingLot] = None) -> Flask:
    settings = settings or load_settings()
    configure_logging(settings.log_level, settings.log_format)

    app = Flask(__name__)
    app.extensions["parking_settings"] = settings
    app.extensions["parking_lot"] = lot if lot is not None else ParkingLot()
    started = time.monotonic()

    CORS(
        app,
        origins=settings.cors_origin,
        methods=settings.cors_methods,
        allow_headers=settings.cors_headers,
        send_wildcard=True,
    )

    # one per-client bucket shared by every API route; "/" and "/health" stay unlimited
    limiter = Limiter(
        get_remote_address,
        app=app,
        storage_uri="memory://",
        headers_enabled=True,
    )
    limiter.shared_limit(settings.rate_limit, scope="api")(api)
    app.extensions["parking_limiter"] = limiter

    app.register_blueprint(api, url_prefix=settings.api_prefix)

    @app.route("/", methods=["GET"])
    def root():
        return jsonify({
            "message": "Parking Lot Web Service is running!",
            "version": settings.api_version,
            "environment": settings.environment,
            "timestamp": _now(),
        })

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({
            "status": "OK",
            "timestamp": _now(),
            "uptime": round(time.monotonic() - started, 3),
        })

    @app.before_request
    def _start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def _security_headers(response):
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response

    @app.after_request
    def _log_request(response):
        duration_ms = (time.perf_counter() - g.get("request_started", time.perf_counter())) * 1000
        level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(level, "HTTP Request", extra={
            "method": request.method,
            "url": request.full_path.rstrip("?"),
            "statusCode": response.status_code,
            "duration": f"{duration_ms:.1f}ms",
            "userAgent": request.headers.get("User-Agent"),
            "ip": request.remote_addr,
        })
        return response

    app.register_error_handler(ParkingLotError, _handle_domain_error)
    app.register_error_handler(RequestValidationError, _handle_domain_error)
    app.register_error_handler(HTTPException, _handle_http_error)
    app.register_error_handler(Exception, _handle_unexpected)

    logger.info("Parking lot app ready", extra={
        "environment": settings.environment,
        "prefix": settings.api_prefix,
    })
    return app


if __name__ == "__main__":
    _settings = load_settings()
    create_app(_settings).run(host=_settings.host, port=_settings.port, debug=_settings.debug)
