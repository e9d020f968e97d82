from typing import Any, Dict, FrozenSet

from models.document import DocumentKind, Operation, Role

ALL_OPERATIONS = frozenset(Operation)
NOTHING: FrozenSet[Operation] = frozenset()

MEMBERSHIP_FIELDS = ("ownerId", "memberIds", "memberRoles")

POLICY: Dict[DocumentKind, Dict[Role, FrozenSet[Operation]]] = {
    DocumentKind.LIBRARY_ITEM: {
        Role.OWNER: ALL_OPERATIONS,
        Role.EDITOR: NOTHING,
        Role.VIEWER: NOTHING,
        Role.NONE: NOTHING,
    },
    DocumentKind.TOURNAMENT: {
        Role.OWNER: ALL_OPERATIONS,
        Role.EDITOR: frozenset({Operation.UPDATE}),
        Role.VIEWER: NOTHING,
        Role.NONE: NOTHING,
    },
    DocumentKind.GAME_SESSION: {
        Role.OWNER: ALL_OPERATIONS,
        Role.EDITOR: frozenset({Operation.CREATE, Operation.UPDATE}),
        Role.VIEWER: NOTHING,
        Role.NONE: NOTHING,
    },
}


def is_permitted(kind: DocumentKind, role: Role, operation: Operation) -> bool:
    return operation in POLICY[kind][role]


def membership_changed(existing: Any, incoming: Any) -> bool:
    if not isinstance(existing, dict) or not isinstance(incoming, dict):
        return True
    return any(existing.get(field) != incoming.get(field) for field in MEMBERSHIP_FIELDS)


def authorize(kind: DocumentKind, role: Role, operation: Operation,
              existing: Any = None, incoming: Any = None) -> bool:
    """Decide from the actor's role alone whether the mutation may go ahead.

    Field content matters in one place: only the owner may rewrite the
    membership of a tournament.
    """
    if not is_permitted(kind, role, operation):
        return False
    if kind is DocumentKind.TOURNAMENT and operation is Operation.UPDATE and role is not Role.OWNER:
        return not membership_changed(existing, incoming)
    return True
