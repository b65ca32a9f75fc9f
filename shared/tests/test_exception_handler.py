import pytest
from rest_framework.exceptions import ValidationError

from shared.api.exceptions import domain_exception_handler
from shared.domain.exceptions import (
    ContentionError,
    InactiveError,
    InvalidStateError,
    NoAvailabilityError,
    NotFoundError,
    UnauthorizedError,
)


@pytest.mark.parametrize(
    "error, status_code, code",
    [
        (NotFoundError("gone"), 404, "not_found"),
        (UnauthorizedError("nope"), 403, "unauthorized"),
        (InactiveError("closed"), 422, "inactive"),
        (NoAvailabilityError("full"), 409, "no_availability"),
        (InvalidStateError("done"), 409, "invalid_state"),
    ],
)
def test_domain_errors_map_to_status_and_code(error, status_code, code):
    response = domain_exception_handler(error, {})
    assert response.status_code == status_code
    assert response.data == {"code": code, "detail": error.message}
    assert not response.has_header("Retry-After")


def test_contention_asks_client_to_retry(settings):
    settings.PARKING_CONTENTION_RETRY_AFTER = 3
    response = domain_exception_handler(ContentionError(), {})
    assert response.status_code == 503
    assert response["Retry-After"] == "3"
    assert response.data["code"] == "contention"


def test_other_errors_fall_through_to_drf():
    response = domain_exception_handler(ValidationError({"field": ["bad"]}), {})
    assert response.status_code == 400
    assert response.data == {"field": ["bad"]}
