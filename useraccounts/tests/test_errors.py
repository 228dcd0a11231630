from __future__ import annotations

import pytest
from flask import Flask

from useraccounts.domain.users.exceptions import EmptyUpdateError, UserNotFoundError
from useraccounts.shared.errors import (
    AppError,
    ForbiddenError,
    InfrastructureError,
    PreconditionFailedError,
    ResourceNotFoundError,
    UnauthorizedError,
    ValidationError,
)
from useraccounts.shared.middleware.error_handler import configure_error_handling
from useraccounts.tests.fakes import make_user


@pytest.mark.parametrize(
    ("error", "status", "code"),
    [
        (ValidationError(errors=[{"message": "bad", "path": ["body", "email"]}]), 400, "FAILED_TO_VALIDATE"),
        (UnauthorizedError("Access token not found"), 401, "UNAUTHORIZED"),
        (ForbiddenError("Access denied for a specific route"), 403, "FORBIDDEN"),
        (ResourceNotFoundError("missing"), 404, "RESOURCE_NOT_FOUND"),
        (UserNotFoundError(), 404, "RESOURCE_NOT_FOUND"),
        (PreconditionFailedError("nothing to do"), 412, "PRECONDITION_FAILED"),
        (EmptyUpdateError(), 412, "PRECONDITION_FAILED"),
        (InfrastructureError(), 500, "RUNTIME_ERROR"),
    ],
)
def test_errors_render_json_envelope(error: AppError, status: int, code: str) -> None:
    app = Flask(__name__)
    configure_error_handling(app)

    @app.get("/boom")
    def boom():
        raise error

    response = app.test_client().get("/boom")

    assert response.status_code == status
    payload = response.get_json()
    assert payload["code"] == code
    assert payload["message"] == error.message
    if error.errors:
        assert payload["errors"] == [dict(item) for item in error.errors]
    else:
        assert "errors" not in payload


def test_unexpected_exception_is_generic_500() -> None:
    app = Flask(__name__)
    configure_error_handling(app)

    @app.get("/boom")
    def boom():
        raise KeyError("secret detail")

    response = app.test_client().get("/boom")

    assert response.status_code == 500
    assert response.get_json() == {"code": "RUNTIME_ERROR", "message": "An internal error occurred"}


def test_invariant_violation_renders_as_validation_error() -> None:
    app = Flask(__name__)
    configure_error_handling(app)

    @app.get("/boom")
    def boom():
        make_user().apply_changes({"salt": "forged"})

    response = app.test_client().get("/boom")

    assert response.status_code == 400
    assert response.get_json() == {
        "code": "FAILED_TO_VALIDATE",
        "message": "Request validation failed",
        "errors": [{"message": "salt: field cannot be updated", "path": ["salt"]}],
    }


def test_user_errors_belong_to_the_shared_taxonomy() -> None:
    assert isinstance(UserNotFoundError(), ResourceNotFoundError)
    assert UserNotFoundError().message == "User not found"
    empty = EmptyUpdateError()
    assert isinstance(empty, PreconditionFailedError)
    assert empty.message == "At least one property to be set for user update"
    assert empty.errors[0]["path"] == ["update_body"]
