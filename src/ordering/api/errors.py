"""HTTP mapping for ordering errors.

Protean's own FastAPI handlers cover its base exceptions; the handlers added
here give every ordering error its own status and a stable ``code`` so clients
can tell, say, an unpriced order from an invalid transition. A write that lost
a race to another request answers 409 ``concurrent_modification`` and can be
retried.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers

from ordering.errors import (
    ActionNotPermitted,
    CheckoutFailed,
    InvalidPrice,
    InvalidTransition,
    ItemNotFound,
    MissingSelection,
    PricesFrozen,
    RecordNotFound,
    SchedulingTooFar,
    SchedulingTooSoon,
    UnpricedCustomItems,
)

ERROR_RESPONSES = {
    MissingSelection: (400, "missing_selection"),
    SchedulingTooSoon: (400, "scheduling_too_soon"),
    SchedulingTooFar: (400, "scheduling_too_far"),
    InvalidPrice: (400, "invalid_price"),
    ValidationError: (400, "validation_error"),
    InvalidTransition: (409, "invalid_transition"),
    UnpricedCustomItems: (409, "unpriced_custom_items"),
    PricesFrozen: (409, "prices_frozen"),
    ActionNotPermitted: (403, "action_not_permitted"),
    CheckoutFailed: (500, "checkout_failed"),
    ExpectedVersionError: (409, "concurrent_modification"),
    ItemNotFound: (404, "item_not_found"),
    RecordNotFound: (404, "record_not_found"),
    ObjectNotFoundError: (404, "not_found"),
}


def _handler(status_code: int, code: str):
    async def handle(request: Request, exc: Exception) -> JSONResponse:
        messages = getattr(exc, "messages", None) or str(exc)
        return JSONResponse(status_code=status_code, content={"code": code, "error": messages})

    return handle


def register_error_handlers(app: FastAPI) -> None:
    """Install Protean's handlers, then the ordering-specific ones on top."""
    register_exception_handlers(app)
    for exc_class, (status_code, code) in ERROR_RESPONSES.items():
        app.add_exception_handler(exc_class, _handler(status_code, code))
