# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from functools import cached_property

from useraccounts.application.services.session_tokens import SessionIssuer, SessionVerifier
from useraccounts.application.use_cases.users.change_password import ChangePasswordUseCase
from useraccounts.application.use_cases.users.delete_user import DeleteUserUseCase
from useraccounts.application.use_cases.users.get_user import GetUserUseCase
from useraccounts.application.use_cases.users.list_users import ListUsersUseCase
from useraccounts.application.use_cases.users.login_user import LoginUserUseCase
from useraccounts.application.use_cases.users.logout_user import LogoutUserUseCase
from useraccounts.application.use_cases.users.register_user import RegisterUserUseCase
from useraccounts.application.use_cases.users.update_user import UpdateUserUseCase
from useraccounts.domain.users.repositories import TokenCache
from useraccounts.infrastructure.cache import build_token_cache
from useraccounts.infrastructure.db import Database
from useraccounts.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)
from useraccounts.interfaces.http.controllers.auth_controller import AuthController
from useraccounts.interfaces.http.controllers.misc_controller import MiscController
from useraccounts.interfaces.http.controllers.users_controller import UsersController
from useraccounts.shared.config import AppConfig
from useraccounts.shared.logging import logger


class Container:
    def __init__(self, config: AppConfig) -> None:
        self.config = config
        self._closed = False

    @cached_property
    def database(self) -> Database:
        return Database(self.config.database)

    @cached_property
    def token_cache(self) -> TokenCache:
        return build_token_cache(self.config.cache)

    @cached_property
    def session_issuer(self) -> SessionIssuer:
        return SessionIssuer(
            cache=self.token_cache,
            secret=self.config.jwt.secret,
            algorithm=self.config.jwt.algorithm,
            expires_in=self.config.jwt.expires_in,
        )

    @cached_property
    def session_verifier(self) -> SessionVerifier:
        return SessionVerifier(
            cache=self.token_cache,
            secret=self.config.jwt.secret,
            algorithm=self.config.jwt.algorithm,
        )

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self.database.session_factory)

    # Use cases

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(users=self.user_repository, sessions=self.session_issuer)

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(users=self.user_repository, sessions=self.session_issuer)

    @cached_property
    def logout_user_use_case(self) -> LogoutUserUseCase:
        return LogoutUserUseCase(cache=self.token_cache)

    @cached_property
    def get_user_use_case(self) -> GetUserUseCase:
        return GetUserUseCase(users=self.user_repository)

    @cached_property
    def list_users_use_case(self) -> ListUsersUseCase:
        return ListUsersUseCase(users=self.user_repository)

    @cached_property
    def update_user_use_case(self) -> UpdateUserUseCase:
        return UpdateUserUseCase(users=self.user_repository)

    @cached_property
    def delete_user_use_case(self) -> DeleteUserUseCase:
        return DeleteUserUseCase(users=self.user_repository, cache=self.token_cache)

    @cached_property
    def change_password_use_case(self) -> ChangePasswordUseCase:
        return ChangePasswordUseCase(users=self.user_repository)

    # Controllers

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            login_use_case=self.login_user_use_case,
            logout_use_case=self.logout_user_use_case,
            verifier=self.session_verifier,
        )

    @cached_property
    def users_controller(self) -> UsersController:
        return UsersController(
            register_use_case=self.register_user_use_case,
            get_use_case=self.get_user_use_case,
            list_use_case=self.list_users_use_case,
            update_use_case=self.update_user_use_case,
            delete_use_case=self.delete_user_use_case,
            change_password_use_case=self.change_password_use_case,
            verifier=self.session_verifier,
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(database=self.database)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        # Only tear down what was actually built
        if "token_cache" in self.__dict__:
            self.token_cache.close()
        if "database" in self.__dict__:
            self.database.dispose()
        logger.info("container: resources released")


__all__ = ["Container"]
