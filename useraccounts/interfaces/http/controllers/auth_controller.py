# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, g, jsonify, request
from pydantic import ValidationError

from useraccounts.application.services.session_tokens import SessionVerifier
from useraccounts.application.use_cases.users.login_user import LoginUserUseCase
from useraccounts.application.use_cases.users.logout_user import LogoutUserUseCase
from useraccounts.interfaces.http.dto.auth import LoginRequestDTO, LogoutResponseDTO
from useraccounts.interfaces.http.security import AUTHORIZATION_HEADER, require_session
from useraccounts.shared.errors.validation import raise_validation_error
from useraccounts.shared.logging import logger


class AuthController:
    def __init__(
        self,
        *,
        login_use_case: LoginUserUseCase,
        logout_use_case: LogoutUserUseCase,
        verifier: SessionVerifier,
    ) -> None:
        self._login_use_case = login_use_case
        self._logout_use_case = logout_use_case
        self._verifier = verifier

    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc, root="credentials")

        user, token = self._login_use_case.execute(dto.email, dto.password)

        response = jsonify(user)
        response.headers[AUTHORIZATION_HEADER] = token
        logger.info(f"auth.login: ok user_id={user['id']}")
        return response, 200

    @require_session()
    def logout(self) -> tuple[Response, int]:
        self._logout_use_case.execute(g.access_token, g.user_detail.get("id"))
        return jsonify(LogoutResponseDTO().model_dump()), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api")
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/logout", view_func=self.logout, methods=["GET"])
        return bp
