"""
Authorization policy for marketplace operations.

Every operation declares the set of roles it accepts and, optionally, an
ownership rule evaluated against facts about the target resource. The policy
is a pure function of (operation, actor, ownership facts); it performs no I/O
and holds no state, so callers load the resource first and pass the facts in.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional
import enum
import uuid

from app.models.user import User, UserRole
from app.utils.exceptions import AuthenticationError, InsufficientPermissionsError


@dataclass(frozen=True)
class Actor:
    """Authenticated identity performing an operation."""

    id: uuid.UUID
    email: str
    name: str
    role: UserRole

    @classmethod
    def from_user(cls, user: User) -> "Actor":
        return cls(id=user.id, email=user.email, name=user.full_name, role=user.role)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


@dataclass(frozen=True)
class OwnershipFacts:
    """Foreign-key relations of a resource that ownership rules are checked against."""

    property_seller_id: Optional[uuid.UUID] = None
    sale_buyer_id: Optional[uuid.UUID] = None
    sale_seller_id: Optional[uuid.UUID] = None

    @classmethod
    def for_property(cls, property_obj) -> "OwnershipFacts":
        return cls(property_seller_id=property_obj.seller_id)

    @classmethod
    def for_sale(cls, sale) -> "OwnershipFacts":
        return cls(sale_buyer_id=sale.buyer_id, sale_seller_id=sale.seller_id)


class Operation(str, enum.Enum):
    VIEW_PROPERTY = "view_property"
    CREATE_PROPERTY = "create_property"
    UPDATE_PROPERTY = "update_property"
    DELETE_PROPERTY = "delete_property"
    CREATE_SALE = "create_sale"
    VIEW_SALE = "view_sale"
    UPDATE_SALE = "update_sale"
    VIEW_SALE_STATS = "view_sale_stats"
    VIEW_PAYMENTS = "view_payments"
    CREATE_PAYMENT = "create_payment"
    UPDATE_PAYMENT_STATUS = "update_payment_status"
    LIST_PAYMENTS = "list_payments"
    LIST_USERS = "list_users"
    VIEW_USER_STATS = "view_user_stats"
    UPDATE_USER_ROLE = "update_user_role"


class Ownership(str, enum.Enum):
    NONE = "none"
    PROPERTY_OWNER = "property_owner"
    SALE_PARTICIPANT = "sale_participant"


@dataclass(frozen=True)
class Rule:
    """Capability set of an operation. roles=None marks a public operation."""

    roles: Optional[FrozenSet[UserRole]]
    ownership: Ownership
    action: str


ANY_ROLE = frozenset(UserRole)
ADMIN_ONLY = frozenset({UserRole.ADMIN})

POLICY: Dict[Operation, Rule] = {
    Operation.VIEW_PROPERTY: Rule(None, Ownership.NONE, "view this property"),
    Operation.CREATE_PROPERTY: Rule(
        frozenset({UserRole.SELLER, UserRole.ADMIN}), Ownership.NONE, "create properties"
    ),
    Operation.UPDATE_PROPERTY: Rule(ANY_ROLE, Ownership.PROPERTY_OWNER, "update this property"),
    Operation.DELETE_PROPERTY: Rule(ANY_ROLE, Ownership.PROPERTY_OWNER, "delete this property"),
    Operation.CREATE_SALE: Rule(
        frozenset({UserRole.BUYER, UserRole.ADMIN}), Ownership.NONE, "create sales"
    ),
    Operation.VIEW_SALE: Rule(ANY_ROLE, Ownership.SALE_PARTICIPANT, "view this sale"),
    Operation.UPDATE_SALE: Rule(ANY_ROLE, Ownership.SALE_PARTICIPANT, "update this sale"),
    Operation.VIEW_SALE_STATS: Rule(ADMIN_ONLY, Ownership.NONE, "view sale statistics"),
    Operation.VIEW_PAYMENTS: Rule(ANY_ROLE, Ownership.SALE_PARTICIPANT, "view these payments"),
    Operation.CREATE_PAYMENT: Rule(
        ANY_ROLE, Ownership.SALE_PARTICIPANT, "create payment for this sale"
    ),
    Operation.UPDATE_PAYMENT_STATUS: Rule(ADMIN_ONLY, Ownership.NONE, "update payment status"),
    Operation.LIST_PAYMENTS: Rule(ADMIN_ONLY, Ownership.NONE, "list all payments"),
    Operation.LIST_USERS: Rule(ADMIN_ONLY, Ownership.NONE, "list users"),
    Operation.VIEW_USER_STATS: Rule(ADMIN_ONLY, Ownership.NONE, "view user statistics"),
    Operation.UPDATE_USER_ROLE: Rule(ADMIN_ONLY, Ownership.NONE, "update user roles"),
}


def _owns(rule: Rule, actor: Actor, facts: Optional[OwnershipFacts]) -> bool:
    if rule.ownership == Ownership.NONE:
        return True
    if facts is None:
        return False
    if rule.ownership == Ownership.PROPERTY_OWNER:
        return facts.property_seller_id == actor.id
    return actor.id in (facts.sale_buyer_id, facts.sale_seller_id)


def is_allowed(
    operation: Operation,
    actor: Optional[Actor],
    facts: Optional[OwnershipFacts] = None
) -> bool:
    """
    Decide whether the actor may perform the operation.

    Args:
        operation: Operation being attempted
        actor: Authenticated actor, or None for anonymous callers
        facts: Ownership facts of the target resource

    Returns:
        True if allowed, False otherwise
    """
    rule = POLICY[operation]

    if rule.roles is None:
        return True
    if actor is None or actor.role not in rule.roles:
        return False
    # Admins override every ownership rule
    if actor.is_admin:
        return True
    return _owns(rule, actor, facts)


def authorize(
    operation: Operation,
    actor: Optional[Actor],
    facts: Optional[OwnershipFacts] = None
) -> None:
    """
    Enforce the policy for an operation.

    Raises:
        AuthenticationError: If the operation requires an actor and none is given
        InsufficientPermissionsError: If the actor is not allowed
    """
    rule = POLICY[operation]
    if actor is None and rule.roles is not None:
        raise AuthenticationError()
    if not is_allowed(operation, actor, facts):
        raise InsufficientPermissionsError(rule.action)


def resolve_seller_id(actor: Actor, requested: Optional[uuid.UUID]) -> uuid.UUID:
    """Owner of a new listing: admins may list on behalf of a seller, sellers list for themselves."""
    if actor.is_admin and requested:
        return requested
    return actor.id


def resolve_buyer_id(actor: Actor, requested: Optional[uuid.UUID]) -> uuid.UUID:
    """Buyer of a new sale: admins may record a sale for a buyer, buyers buy for themselves."""
    if actor.is_admin and requested:
        return requested
    return actor.id
