# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Flask, Response, g, jsonify, request
from werkzeug.exceptions import HTTPException

from useraccounts.domain.exceptions import InvariantViolationError
from useraccounts.shared.logging import logger

from .base import AppError, ValidationError


def handle_app_error(error: AppError) -> tuple[Response, HTTPStatus]:
    response = jsonify(error.to_dict())
    return response, error.status


def register_error_handler(
    app: Flask,
    *,
    debug_mode: bool = False,
    default_status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR,
) -> None:

    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        if exc.status >= HTTPStatus.INTERNAL_SERVER_ERROR:
            cause = exc.__cause__
            if cause is not None:
                logger.opt(exception=cause).error(
                    f"{exc.code} on {request.method} {request.path}: {exc.message}"
                )
            else:
                logger.error(f"{exc.code} on {request.method} {request.path}: {exc.message}")
        else:
            logger.warning(
                f"Handled application error {exc.code} ({int(exc.status)}) "
                f"on {request.method} {request.path}: {exc.message}"
            )
        return handle_app_error(exc)

    @app.errorhandler(InvariantViolationError)
    def _handle_invariant(exc: InvariantViolationError):
        logger.warning(f"Invariant violated on {request.method} {request.path}: {exc}")
        path = [exc.field] if exc.field else []
        return handle_app_error(ValidationError(errors=[{"message": str(exc), "path": path}]))

    @app.errorhandler(HTTPException)
    def _handle_http(exc: HTTPException):
        status = exc.code or int(default_status)
        code = (exc.name or "HTTP_ERROR").upper().replace(" ", "_")
        return jsonify({"code": code, "message": exc.description or exc.name}), status

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        ip_address = (
            request.headers.get("X-Forwarded-For", "").split(",")[0].strip()
            if request.headers.get("X-Forwarded-For")
            else (request.remote_addr or "unknown")
        )
        user_detail = getattr(g, "user_detail", None) or {}

        if debug_mode:
            logger.exception(
                f"Unhandled exception: {request.method} {request.path} "
                f"from {ip_address}, user={user_detail.get('id')}, "
                f"query={dict(request.args)}, body_size={len(request.data)}"
            )
        else:
            logger.opt(exception=exc).error(
                f"Error: {type(exc).__name__} on {request.method} {request.path}"
            )

        response = jsonify({"code": "RUNTIME_ERROR", "message": "An internal error occurred"})
        return response, default_status


__all__ = ["handle_app_error", "register_error_handler"]
