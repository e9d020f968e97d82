from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field, computed_field

from models.document import DocumentKind, Operation, Role


class CheckResult(BaseModel):
    field: str
    check: str
    passed: bool
    actual: Any = None
    expected: Optional[str] = None
    category: Literal["field", "reference"] = "field"


class Allow(BaseModel):
    reason: Literal["allow"] = "allow"

    @computed_field
    @property
    def allowed(self) -> bool:
        return True


class _Deny(BaseModel):
    @computed_field
    @property
    def allowed(self) -> bool:
        return False


class Unauthenticated(_Deny):
    reason: Literal["unauthenticated"] = "unauthenticated"


class Unauthorized(_Deny):
    reason: Literal["unauthorized"] = "unauthorized"
    role: Role
    operation: Operation
    kind: DocumentKind


class SchemaViolation(_Deny):
    reason: Literal["schemaViolation"] = "schemaViolation"
    failures: List[CheckResult]


class ImmutableFieldChanged(_Deny):
    reason: Literal["immutableFieldChanged"] = "immutableFieldChanged"
    fields: List[str]


class ReferentialIntegrityViolation(_Deny):
    reason: Literal["referentialIntegrityViolation"] = "referentialIntegrityViolation"
    failures: List[CheckResult]


Decision = Annotated[
    Union[
        Allow,
        Unauthenticated,
        Unauthorized,
        SchemaViolation,
        ImmutableFieldChanged,
        ReferentialIntegrityViolation,
    ],
    Field(discriminator="reason"),
]


class EvaluateRequest(BaseModel):
    operation: Operation
    kind: DocumentKind
    path: str
    existing: Optional[Any] = None
    incoming: Optional[Any] = None
    parent: Optional[Any] = None
