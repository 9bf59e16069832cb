"""Chef conflict resolution.

When a customer adds a dish from a chef other than the one whose dishes are
already in the cart, ``Cart.add_item`` hands back a ``ChefConflict``. The
customer then either keeps the current cart (reject) or starts over with the
new chef (replace).
"""

from dataclasses import dataclass
from enum import Enum

import structlog

from ordering.cart.candidate import ItemCandidate

logger = structlog.get_logger(__name__)


class ConflictPolicy(Enum):
    REJECT = "reject"
    REPLACE = "replace"


@dataclass(frozen=True)
class Resolution:
    """What happened to the cart, and whether to continue to checkout."""

    policy: ConflictPolicy
    item_id: str | None
    proceed_to_checkout: bool
    items_removed: int = 0


def resolve_chef_conflict(
    cart,
    candidate: ItemCandidate,
    policy: ConflictPolicy,
    proceed_to_checkout: bool = False,
) -> Resolution:
    """Apply ``policy`` to ``cart`` for ``candidate``.

    REJECT leaves the cart exactly as it was. REPLACE validates the candidate
    first, so a bad candidate never empties the cart, then clears the cart and
    adds the candidate. When the cart holds no conflicting items REPLACE simply
    adds. ``proceed_to_checkout`` is carried through unchanged in both cases.
    """
    policy = ConflictPolicy(policy)

    if policy == ConflictPolicy.REJECT:
        logger.info("chef_conflict_rejected", cart_id=str(cart.id), candidate_chef_id=candidate.chef_id)
        return Resolution(policy=policy, item_id=None, proceed_to_checkout=proceed_to_checkout)

    candidate.validate()

    removed = 0
    current_chef = cart.current_chef_id()
    if current_chef is not None and current_chef != str(candidate.chef_id):
        removed = len(cart.items)
        cart.clear(reason="chef_replaced")

    item = cart.add_item(candidate, proceed_to_checkout=proceed_to_checkout)

    logger.info(
        "chef_conflict_replaced",
        cart_id=str(cart.id),
        previous_chef_id=current_chef,
        chef_id=candidate.chef_id,
        items_removed=removed,
    )
    return Resolution(
        policy=policy,
        item_id=str(item.id),
        proceed_to_checkout=proceed_to_checkout,
        items_removed=removed,
    )
