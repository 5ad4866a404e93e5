"""Validation engine: decides whether a schema may be compiled.

All checks run on every call, in a fixed order, so the same schema always
produces the same errors and warnings in the same order. Errors block
compilation; warnings never do.
"""
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional
from appgen.core.config import Settings, settings as default_settings
from appgen.generators.compiler import compile_schema
from appgen.generators.types import coerce_default
from appgen.generators.utils import is_identity_field
from appgen.schemas.schema import Diagnostic, SchemaDefinition, ValidationResult

log = logging.getLogger(__name__)

IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

RELATION_SUFFIXES = ("_id", "_ref", "_fk")


class IssueCode(str, Enum):
    # Errors
    ENTITY_NAME_EMPTY = "ENTITY_NAME_EMPTY"
    ENTITY_NAME_INVALID = "ENTITY_NAME_INVALID"
    NO_FIELDS = "NO_FIELDS"
    DUPLICATE_FIELD_NAME = "DUPLICATE_FIELD_NAME"
    FIELD_NAME_INVALID = "FIELD_NAME_INVALID"
    DEFAULT_VALUE_INVALID = "DEFAULT_VALUE_INVALID"

    # Warnings
    RELATION_WITHOUT_INDEX = "RELATION_WITHOUT_INDEX"
    REQUIRED_TEXT_WITHOUT_DEFAULT = "REQUIRED_TEXT_WITHOUT_DEFAULT"
    PAGINATION_RECOMMENDED = "PAGINATION_RECOMMENDED"
    NO_OPERATIONS = "NO_OPERATIONS"
    IDENTITY_TYPE_IGNORED = "IDENTITY_TYPE_IGNORED"


@dataclass(frozen=True)
class ValidationReport:
    errors: List[Diagnostic] = field(default_factory=list)
    warnings: List[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _issue(code: IssueCode, message: str, field_name: Optional[str] = None) -> Diagnostic:
    return Diagnostic(code=code.value, message=message, field=field_name)


def is_identifier(name: str) -> bool:
    return bool(IDENTIFIER_RE.match(name))


# Error checks

def check_entity_name(schema: SchemaDefinition) -> List[Diagnostic]:
    name = schema.entity_name
    if not name or not name.strip():
        return [_issue(IssueCode.ENTITY_NAME_EMPTY, "Entity name is required")]
    if not is_identifier(name):
        return [_issue(
            IssueCode.ENTITY_NAME_INVALID,
            f"Entity name '{name}' must start with a letter or underscore and contain only letters, digits and underscores",
        )]
    return []


def check_has_fields(schema: SchemaDefinition) -> List[Diagnostic]:
    if not schema.fields:
        return [_issue(IssueCode.NO_FIELDS, "At least one field is required")]
    return []


def check_duplicate_names(schema: SchemaDefinition) -> List[Diagnostic]:
    seen: Dict[str, List[str]] = {}
    for f in schema.fields:
        seen.setdefault(f.name.lower(), []).append(f.name)

    issues = []
    for names in seen.values():
        if len(names) > 1:
            issues.append(_issue(
                IssueCode.DUPLICATE_FIELD_NAME,
                f"Field name '{names[0]}' is used by {len(names)} fields (names are case-insensitive)",
                names[0],
            ))
    return issues


def check_field_names(schema: SchemaDefinition) -> List[Diagnostic]:
    issues = []
    for f in schema.fields:
        if not is_identifier(f.name):
            issues.append(_issue(
                IssueCode.FIELD_NAME_INVALID,
                f"Field name '{f.name}' must start with a letter or underscore and contain only letters, digits and underscores",
                f.name,
            ))
    return issues


def check_default_values(schema: SchemaDefinition) -> List[Diagnostic]:
    issues = []
    for f in schema.fields:
        if f.default_value is None or is_identity_field(f):
            continue
        try:
            coerce_default(f.type, f.default_value)
        except ValueError as e:
            issues.append(_issue(
                IssueCode.DEFAULT_VALUE_INVALID,
                f"Default value for '{f.name}' is not a valid {f.type}: {e}",
                f.name,
            ))
    return issues


# Warning checks

def check_relation_indexes(schema: SchemaDefinition) -> List[Diagnostic]:
    issues = []
    for f in schema.fields:
        if is_identity_field(f) or f.indexed:
            continue
        if f.name.lower().endswith(RELATION_SUFFIXES):
            issues.append(_issue(
                IssueCode.RELATION_WITHOUT_INDEX,
                f"Consider adding an index on the '{f.name}' field for better query performance",
                f.name,
            ))
    return issues


def check_required_text_defaults(schema: SchemaDefinition) -> List[Diagnostic]:
    issues = []
    for f in schema.fields:
        if f.type == "text" and f.required and f.default_value is None:
            issues.append(_issue(
                IssueCode.REQUIRED_TEXT_WITHOUT_DEFAULT,
                f"Required text field '{f.name}' has no default value; existing rows and imports will need one",
                f.name,
            ))
    return issues


def check_pagination(schema: SchemaDefinition, threshold: int) -> List[Diagnostic]:
    if schema.operations.read and not schema.paginate and len(schema.fields) > threshold:
        return [_issue(
            IssueCode.PAGINATION_RECOMMENDED,
            f"Entity has {len(schema.fields)} fields (more than {threshold}); consider enabling pagination for list reads",
        )]
    return []


def check_operations(schema: SchemaDefinition) -> List[Diagnostic]:
    if not schema.operations.any_enabled():
        return [_issue(
            IssueCode.NO_OPERATIONS,
            "No CRUD operations are enabled; the generated API and UI will have no actions",
        )]
    return []


def check_identity_type(schema: SchemaDefinition) -> List[Diagnostic]:
    issues = []
    for f in schema.fields:
        if is_identity_field(f) and f.type != "number":
            issues.append(_issue(
                IssueCode.IDENTITY_TYPE_IGNORED,
                f"Field '{f.name}' is the identity column and is always an auto-incrementing integer; its type '{f.type}' is ignored",
                f.name,
            ))
    return issues


def validate_schema(schema: SchemaDefinition, settings: Optional[Settings] = None) -> ValidationReport:
    """
    Run every check against ``schema``.

    Args:
        schema: Schema snapshot to check
        settings: Settings providing thresholds (defaults to the global settings)

    Returns:
        ValidationReport with errors and warnings in evaluation order
    """
    settings = settings or default_settings

    errors: List[Diagnostic] = []
    errors += check_entity_name(schema)
    errors += check_has_fields(schema)
    errors += check_duplicate_names(schema)
    errors += check_field_names(schema)
    errors += check_default_values(schema)

    warnings: List[Diagnostic] = []
    warnings += check_relation_indexes(schema)
    warnings += check_required_text_defaults(schema)
    warnings += check_pagination(schema, settings.pagination_field_threshold)
    warnings += check_operations(schema)
    warnings += check_identity_type(schema)

    return ValidationReport(errors=errors, warnings=warnings)


def run_validation(schema: SchemaDefinition, settings: Optional[Settings] = None) -> ValidationResult:
    """
    Validate ``schema`` and, when it has no errors, compile it.

    Raises:
        CompilationError: if a validated schema fails to compile
    """
    report = validate_schema(schema, settings)
    if not report.ok:
        log.info(
            "Validation failed for entity %r: %d errors, %d warnings",
            schema.entity_name, len(report.errors), len(report.warnings),
        )
        return ValidationResult(success=False, errors=report.errors, warnings=report.warnings)

    files = compile_schema(schema)
    return ValidationResult(
        success=True,
        errors=[],
        warnings=report.warnings,
        generated_files=files,
    )
