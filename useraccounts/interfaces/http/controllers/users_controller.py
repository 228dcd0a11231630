# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, g, jsonify, request
from pydantic import ValidationError

from useraccounts.application.services.session_tokens import SessionVerifier
from useraccounts.application.use_cases.users.change_password import ChangePasswordUseCase
from useraccounts.application.use_cases.users.delete_user import DeleteUserUseCase
from useraccounts.application.use_cases.users.get_user import GetUserUseCase
from useraccounts.application.use_cases.users.list_users import ListUsersUseCase
from useraccounts.application.use_cases.users.register_user import RegisterUserUseCase
from useraccounts.application.use_cases.users.update_user import UpdateUserUseCase
from useraccounts.interfaces.http.dto.users import (
    ChangePasswordRequestDTO,
    RegisterRequestDTO,
    UpdateUserRequestDTO,
    UserListQueryDTO,
)
from useraccounts.interfaces.http.pagination import build_page_links, parse_sort
from useraccounts.interfaces.http.security import AUTHORIZATION_HEADER, require_session
from useraccounts.shared.errors.validation import raise_validation_error
from useraccounts.shared.logging import logger

_PAGING_PARAMS = ("page", "itemsPerPage")


class UsersController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        get_use_case: GetUserUseCase,
        list_use_case: ListUsersUseCase,
        update_use_case: UpdateUserUseCase,
        delete_use_case: DeleteUserUseCase,
        change_password_use_case: ChangePasswordUseCase,
        verifier: SessionVerifier,
    ) -> None:
        self._register_use_case = register_use_case
        self._get_use_case = get_use_case
        self._list_use_case = list_use_case
        self._update_use_case = update_use_case
        self._delete_use_case = delete_use_case
        self._change_password_use_case = change_password_use_case
        self._verifier = verifier

    def create_user(self) -> tuple[Response, int]:
        try:
            dto = RegisterRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc, root="registration_body")

        user, token = self._register_use_case.execute(
            email=dto.email,
            password=dto.password,
            first_name=dto.first_name,
            last_name=dto.last_name,
            dob=dto.dob,
        )
        response = jsonify(user)
        response.headers[AUTHORIZATION_HEADER] = token
        return response, 201

    @require_session()
    def list_users(self) -> tuple[Response, int]:
        try:
            query = UserListQueryDTO.model_validate(request.args.to_dict())
        except ValidationError as exc:
            raise_validation_error(exc, root="query")

        result = self._list_use_case.execute(
            filters=query.filters(),
            sort=parse_sort(query.sort_by),
            page=query.page,
            page_size=query.items_per_page,
        )

        passthrough = {
            key: value for key, value in request.args.items() if key not in _PAGING_PARAMS
        }
        links = build_page_links(
            request.base_url, passthrough, result.page, result.page_size, result.total
        )
        if not result.items:
            logger.debug("users.list: no record found")
            response = Response(status=204)
        else:
            response = jsonify(result.items)
            response.status_code = 200
        response.headers["x-items-count"] = str(result.total)
        response.headers["x-page-links"] = links
        return response, response.status_code

    @require_session()
    def get_user(self, user_id: str) -> tuple[Response, int]:
        return jsonify(self._get_use_case.execute(user_id)), 200

    @require_session(owner_or_admin=True)
    def update_user(self, user_id: str) -> tuple[Response, int]:
        try:
            dto = UpdateUserRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc, root="update_body")

        return jsonify(self._update_use_case.execute(user_id, dto.changes())), 200

    @require_session(owner_or_admin=True)
    def delete_user(self, user_id: str) -> tuple[Response, int]:
        removed = self._delete_use_case.execute(
            user_id, g.access_token, caller_id=g.user_detail.get("id")
        )
        return jsonify(removed), 200

    @require_session(owner_or_admin=True)
    def change_password(self, user_id: str) -> tuple[Response, int]:
        try:
            dto = ChangePasswordRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc, root="change_password")

        user = self._change_password_use_case.execute(
            user_id, dto.current_password, dto.new_password
        )
        return jsonify(user), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("users", __name__, url_prefix="/api/user")
        bp.add_url_rule("", view_func=self.create_user, methods=["POST"])
        bp.add_url_rule("", view_func=self.list_users, methods=["GET"])
        bp.add_url_rule("/<user_id>", view_func=self.get_user, methods=["GET"])
        bp.add_url_rule("/<user_id>", view_func=self.update_user, methods=["PUT"])
        bp.add_url_rule("/<user_id>", view_func=self.delete_user, methods=["DELETE"])
        bp.add_url_rule(
            "/<user_id>/changePassword", view_func=self.change_password, methods=["PUT"]
        )
        return bp
