"""Tests for the validation engine."""
from appgen.core.config import Settings
from appgen.schemas.mutations import create_schema, set_entity_name, set_pagination, toggle_operation, update_field
from appgen.validators import IssueCode, run_validation, validate_schema
from conftest import field_id


def _codes(diagnostics):
    return [d.code for d in diagnostics]


def _schema(fields, **extra):
    return create_schema({"entityName": "Item", "fields": fields, **extra})


def test_book_schema_is_valid(book_schema):
    report = validate_schema(book_schema)
    assert report.ok
    assert report.errors == []


def test_empty_schema_rejected():
    """Test that a schema with zero fields fails with an explicit error."""
    result = run_validation(_schema([]))

    assert result.success is False
    assert _codes(result.errors) == [IssueCode.NO_FIELDS]
    assert "at least one field" in result.errors[0].message.lower()
    assert result.generated_files is None


def test_duplicate_names_rejected_case_insensitively(book_schema):
    """Test that two fields sharing a name (ignoring case) block compilation."""
    schema = update_field(book_schema, field_id(book_schema, "author"), name="Title")
    result = run_validation(schema)

    assert result.success is False
    assert IssueCode.DUPLICATE_FIELD_NAME in _codes(result.errors)
    assert result.errors[0].field == "title"
    assert result.generated_files is None


def test_duplicate_names_reported_once_per_name():
    schema = _schema([
        {"name": "a", "type": "string"},
        {"name": "A", "type": "string"},
        {"name": "a", "type": "string"},
        {"name": "b", "type": "string"},
        {"name": "B", "type": "string"},
    ])
    report = validate_schema(schema)
    dupes = [d for d in report.errors if d.code == IssueCode.DUPLICATE_FIELD_NAME]
    assert [d.field for d in dupes] == ["a", "b"]
    assert "3 fields" in dupes[0].message


def test_entity_name_errors(book_schema):
    empty = validate_schema(set_entity_name(book_schema, "  "))
    assert _codes(empty.errors) == [IssueCode.ENTITY_NAME_EMPTY]

    invalid = validate_schema(set_entity_name(book_schema, "2Books"))
    assert _codes(invalid.errors) == [IssueCode.ENTITY_NAME_INVALID]

    spaced = validate_schema(set_entity_name(book_schema, "Book Item"))
    assert _codes(spaced.errors) == [IssueCode.ENTITY_NAME_INVALID]


def test_field_name_grammar():
    schema = _schema([
        {"name": "ok_name", "type": "string"},
        {"name": "1st", "type": "string"},
        {"name": "has-dash", "type": "string"},
        {"name": "_private", "type": "string"},
        {"name": "", "type": "string"},
    ])
    report = validate_schema(schema)
    invalid = [d.field for d in report.errors if d.code == IssueCode.FIELD_NAME_INVALID]
    assert invalid == ["1st", "has-dash", ""]


def test_invalid_default_values():
    schema = _schema([
        {"name": "count", "type": "number", "defaultValue": "abc"},
        {"name": "active", "type": "boolean", "defaultValue": "maybe"},
        {"name": "born", "type": "date", "defaultValue": "2024-13-40"},
        {"name": "contact", "type": "email", "defaultValue": "nobody"},
        {"name": "ok", "type": "number", "defaultValue": "42"},
    ])
    report = validate_schema(schema)
    invalid = [d.field for d in report.errors if d.code == IssueCode.DEFAULT_VALUE_INVALID]
    assert invalid == ["count", "active", "born", "contact"]


def test_all_checks_run_without_short_circuit():
    """Test that errors from every check and all warnings are reported together."""
    schema = create_schema({
        "entityName": "",
        "fields": [
            {"name": "name", "type": "string"},
            {"name": "Name", "type": "string"},
            {"name": "bad name", "type": "string"},
            {"name": "owner_id", "type": "number"},
            {"name": "notes", "type": "text", "required": True},
        ],
    })
    report = validate_schema(schema)

    assert _codes(report.errors) == [
        IssueCode.ENTITY_NAME_EMPTY,
        IssueCode.DUPLICATE_FIELD_NAME,
        IssueCode.FIELD_NAME_INVALID,
    ]
    assert _codes(report.warnings) == [
        IssueCode.RELATION_WITHOUT_INDEX,
        IssueCode.REQUIRED_TEXT_WITHOUT_DEFAULT,
    ]


def test_failed_result_still_carries_warnings():
    schema = _schema([
        {"name": "author_id", "type": "number"},
        {"name": "AUTHOR_ID", "type": "number"},
    ])
    result = run_validation(schema)
    assert result.success is False
    assert IssueCode.RELATION_WITHOUT_INDEX in _codes(result.warnings)


def test_relation_warning_respects_index_hint():
    unindexed = validate_schema(_schema([{"name": "author_id", "type": "number"}]))
    assert _codes(unindexed.warnings) == [IssueCode.RELATION_WITHOUT_INDEX]
    assert "author_id" in unindexed.warnings[0].message

    indexed = validate_schema(_schema([{"name": "author_id", "type": "number", "indexed": True}]))
    assert indexed.warnings == []


def test_identity_field_is_not_a_relation(book_schema):
    assert IssueCode.RELATION_WITHOUT_INDEX not in _codes(validate_schema(book_schema).warnings)


def test_required_text_with_default_is_fine():
    report = validate_schema(_schema([{"name": "notes", "type": "text", "required": True, "defaultValue": "-"}]))
    assert report.warnings == []


def test_pagination_warning_threshold():
    fields = [{"name": f"f{i}", "type": "string"} for i in range(4)]
    settings = Settings(pagination_field_threshold=3)

    report = validate_schema(_schema(fields), settings)
    assert _codes(report.warnings) == [IssueCode.PAGINATION_RECOMMENDED]

    paginated = validate_schema(set_pagination(_schema(fields), True), settings)
    assert paginated.warnings == []

    write_only = validate_schema(toggle_operation(_schema(fields), "read"), settings)
    assert write_only.warnings == []

    at_threshold = validate_schema(_schema(fields[:3]), settings)
    assert at_threshold.warnings == []


def test_no_operations_warning(book_schema):
    schema = book_schema
    for op in ("create", "read", "update", "delete"):
        schema = toggle_operation(schema, op)
    report = validate_schema(schema)
    assert report.ok
    assert _codes(report.warnings) == [IssueCode.NO_OPERATIONS]


def test_identity_type_warning(book_schema):
    schema = update_field(book_schema, field_id(book_schema, "id"), type="string")
    report = validate_schema(schema)
    assert report.ok
    assert _codes(report.warnings) == [IssueCode.IDENTITY_TYPE_IGNORED]


def test_validation_is_deterministic():
    schema = _schema([
        {"name": "x", "type": "string"},
        {"name": "X", "type": "string"},
        {"name": "owner_ref", "type": "string"},
    ])
    assert validate_schema(schema) == validate_schema(schema)


def test_successful_result_has_all_four_artifacts(book_schema):
    result = run_validation(book_schema)

    assert result.success is True
    assert result.errors == []
    assert set(result.generated_files.as_dict()) == {"sql", "orm", "api", "frontend"}
    assert set(result.to_json()["generatedFiles"]) == {"sql", "orm", "api", "frontend"}
