from copy import deepcopy
from typing import Any, Optional, Union

from loguru import logger

from models.decision import (
    Allow,
    Decision,
    ImmutableFieldChanged,
    ReferentialIntegrityViolation,
    SchemaViolation,
    Unauthenticated,
    Unauthorized,
)
from models.document import Actor, DocumentKind, Operation
from services.paths import DocumentPath, InvalidPath, parse_path
from services.policy import authorize
from services.roles import resolve_role
from services.schemas import changed_immutable_fields, failures, validate_document


class InvalidMutation(ValueError):
    """The caller supplied snapshots that do not fit the requested operation."""


def _check_arguments(operation: Operation, existing: Any, incoming: Any):
    if operation is Operation.CREATE and existing is not None:
        raise InvalidMutation("create must not carry an existing document")
    if operation is Operation.CREATE and incoming is None:
        raise InvalidMutation("create requires an incoming document")
    if operation is Operation.UPDATE and (existing is None or incoming is None):
        raise InvalidMutation("update requires both the existing and the incoming document")
    if operation is Operation.DELETE and existing is None:
        raise InvalidMutation("delete requires the existing document")


def evaluate(actor: Optional[Actor], operation: Union[Operation, str], kind: Union[DocumentKind, str],
             path: Union[DocumentPath, str], existing: Any = None, incoming: Any = None,
             parent: Any = None) -> Decision:
    """Judge a single create/update/delete against the authorization policy and the schemas.

    Authorization runs first so a caller without access never learns which
    field was wrong. For game sessions ``parent`` is the snapshot of the owning
    tournament; it supplies both the membership and the known player ids.
    """
    operation = Operation(operation)
    kind = DocumentKind(kind)
    location = path if isinstance(path, DocumentPath) else parse_path(path)
    if location.kind is not kind:
        raise InvalidPath(f"{location.path!r} holds a {location.kind.value}, not a {kind.value}")
    _check_arguments(operation, existing, incoming)

    # one snapshot for the role lookup and every later check
    existing = deepcopy(existing)
    parent = deepcopy(parent)

    if actor is None:
        logger.info(f"Denied {operation.value} on {location.path}: unauthenticated")
        return Unauthenticated()

    role = resolve_role(actor, operation, location, existing, incoming, parent)
    if not authorize(kind, role, operation, existing, incoming):
        logger.info(f"Denied {operation.value} on {location.path} for {actor.uid}: role {role.value}")
        return Unauthorized(role=role, operation=operation, kind=kind)

    if operation is Operation.DELETE:
        logger.debug(f"Allowed delete on {location.path} for {actor.uid}")
        return Allow()

    failed = failures(validate_document(location, incoming, parent))

    if operation is Operation.UPDATE and isinstance(existing, dict) and isinstance(incoming, dict):
        changed = changed_immutable_fields(kind, existing, incoming)
        # an id that no longer matches its path is malformed, not just changed
        if changed and not any(result.field in changed and result.category == "field" for result in failed):
            logger.info(f"Denied update on {location.path} for {actor.uid}: immutable {changed}")
            return ImmutableFieldChanged(fields=changed)

    if any(result.category == "field" for result in failed):
        logger.info(f"Denied {operation.value} on {location.path}: {len(failed)} failing check(s)")
        return SchemaViolation(failures=failed)
    if failed:
        logger.info(f"Denied {operation.value} on {location.path}: {len(failed)} broken reference(s)")
        return ReferentialIntegrityViolation(failures=failed)

    logger.debug(f"Allowed {operation.value} on {location.path} for {actor.uid}")
    return Allow()
