"""
Test suite for the exception to HTTP status mapping.

System role: Verification of API error translation
"""

import pytest
from fastapi import HTTPException

from motoshop.api.routers.router_utils.error_handling import handle_domain_errors, to_http_exception
from motoshop.core.exceptions import (
    DeletionNotConfirmed,
    FinalCostRequired,
    InvalidTransition,
    JobNotFoundError,
    MotoShopException,
    PermissionDenied,
    PhotoIndexOutOfRange,
    PhotoRequirementNotMet,
    RemoteFailure,
    ValidationError,
)


@pytest.mark.parametrize(
    ("exc", "status_code"),
    [
        (JobNotFoundError("JOB-1"), 404),
        (ValidationError("bad", field="x"), 400),
        (PhotoIndexOutOfRange("start", 5, 2), 400),
        (PhotoRequirementNotMet("completion", 3, 1), 409),
        (FinalCostRequired("JOB-1"), 409),
        (InvalidTransition("completed", "pending"), 409),
        (DeletionNotConfirmed("JOB-1", 1, 2), 409),
        (PermissionDenied("no"), 403),
        (RemoteFailure("down", operation="update"), 502),
        (MotoShopException("other"), 500),
    ],
)
def test_status_mapping(exc, status_code) -> None:
    assert to_http_exception(exc).status_code == status_code


def test_final_cost_required_should_carry_action() -> None:
    detail = to_http_exception(FinalCostRequired("JOB-1")).detail

    assert detail["action"] == "final_cost_required"
    assert detail["details"]["job_id"] == "JOB-1"


class TestHandleDomainErrors:
    async def test_domain_error_should_become_http_exception(self) -> None:
        @handle_domain_errors
        async def endpoint():
            raise JobNotFoundError("JOB-1")

        with pytest.raises(HTTPException) as exc_info:
            await endpoint()

        assert exc_info.value.status_code == 404

    async def test_http_exception_should_pass_through(self) -> None:
        @handle_domain_errors
        async def endpoint():
            raise HTTPException(status_code=418, detail="teapot")

        with pytest.raises(HTTPException) as exc_info:
            await endpoint()

        assert exc_info.value.status_code == 418

    async def test_result_should_be_returned(self) -> None:
        @handle_domain_errors
        async def endpoint(value: int) -> int:
            return value * 2

        assert await endpoint(value=21) == 42
