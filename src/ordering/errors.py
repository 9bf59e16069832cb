"""Error taxonomy for the ordering domain.

Every error derives from a Protean exception so callers can catch either the
broad family (``ValidationError``, ``ObjectNotFoundError``,
``InvalidOperationError``) or the specific reason. All of them are raised with
a ``{field: [messages]}`` mapping, the shape Protean uses for
``ValidationError.messages``.

Chef conflicts are deliberately absent: they are returned as
``ordering.cart.candidate.ChefConflict`` values, never raised.
"""

from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError


# ---------------------------------------------------------------------------
# Client-correctable input
# ---------------------------------------------------------------------------
class MissingSelection(ValidationError):
    """A required choice (dish type, address, payment method) was not made."""


class SchedulingTooSoon(ValidationError):
    """The requested service time is inside the minimum lead time."""


class SchedulingTooFar(ValidationError):
    """The requested service time is beyond the booking window."""


class InvalidPrice(ValidationError):
    """A price is negative, or unset where a final price is required."""


# ---------------------------------------------------------------------------
# Order lifecycle
# ---------------------------------------------------------------------------
class OrderStateError(ValidationError):
    """The order's current state does not allow the requested change."""


class InvalidTransition(OrderStateError):
    """The status change is not in the transition table."""


class UnpricedCustomItems(OrderStateError):
    """Custom dishes must be priced before the order can be accepted or completed."""


class PricesFrozen(OrderStateError):
    """Custom dish prices can only change while the order is pending."""


class ActionNotPermitted(InvalidOperationError):
    """The actor's role does not allow this action on this order."""


# ---------------------------------------------------------------------------
# Integrity and lookups
# ---------------------------------------------------------------------------
class CheckoutFailed(InvalidOperationError):
    """Persisting the order failed; nothing was created and the cart is intact."""


class ItemNotFound(ObjectNotFoundError):
    """A cart item or order line item id does not exist."""


class RecordNotFound(ObjectNotFoundError):
    """A directory record (dish, chef, customer, address, payment method) does not exist."""
