from typing import Any, Optional

from models.document import Actor, DocumentKind, Operation, Role
from services.paths import DocumentPath

_MEMBER_ROLES = {Role.OWNER.value, Role.EDITOR.value, Role.VIEWER.value}


def member_role(document: Any, uid: Optional[str]) -> Role:
    """Role of ``uid`` on a shared document, read from its membership fields.

    The owner is whoever ``ownerId`` names; everybody else is looked up in
    ``memberRoles``. Anyone missing from ``memberIds`` has no role at all.
    """
    if not uid or not isinstance(document, dict):
        return Role.NONE
    member_ids = document.get("memberIds")
    if not isinstance(member_ids, list) or uid not in member_ids:
        return Role.NONE
    if document.get("ownerId") == uid:
        return Role.OWNER
    member_roles = document.get("memberRoles")
    if not isinstance(member_roles, dict):
        return Role.NONE
    role = member_roles.get(uid)
    if not isinstance(role, str) or role not in _MEMBER_ROLES:
        return Role.NONE
    return Role(role)


def resolve_role(actor: Optional[Actor], operation: Operation, path: DocumentPath,
                 existing: Any = None, incoming: Any = None, parent: Any = None) -> Role:
    if actor is None:
        return Role.NONE

    if path.kind is DocumentKind.LIBRARY_ITEM:
        # library items belong to the user named in the path and nobody else
        return Role.OWNER if actor.uid == path.owner_id else Role.NONE

    if path.kind is DocumentKind.TOURNAMENT:
        if operation is Operation.CREATE:
            declared_owner = incoming.get("ownerId") if isinstance(incoming, dict) else None
            return Role.OWNER if declared_owner == actor.uid else Role.NONE
        return member_role(existing, actor.uid)

    # game sessions have no membership of their own
    return member_role(parent, actor.uid)
