# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, jsonify
from sqlalchemy.exc import SQLAlchemyError

from useraccounts.infrastructure.db import Database
from useraccounts.infrastructure.health import check_database
from useraccounts.shared.logging import logger


class MiscController:
    def __init__(self, *, database: Database) -> None:
        self._database = database

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("misc", __name__)
        bp.add_url_rule("/api/status", view_func=self.status, methods=["GET"])
        return bp

    def status(self):
        status: dict[str, object] = {"message": "System is working fine"}
        try:
            check_database(self._database)
            status["database"] = "ok"
        except SQLAlchemyError as exc:
            logger.opt(exception=exc).error("status: database check failed")
            status["database"] = "unavailable"
        return jsonify(status)
