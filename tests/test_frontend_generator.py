"""Tests for the frontend generator."""
from appgen.generators.frontend import render_frontend
from appgen.schemas.mutations import create_schema, toggle_operation


def test_book_component(book_schema):
    jsx = render_frontend(book_schema)

    assert "export default function BookList() {" in jsx
    assert 'const API_URL = "/books";' in jsx
    assert 'data-action="update"' in jsx
    assert 'data-action="delete"' in jsx
    assert '"create"' in jsx
    assert "useEffect(() => {" in jsx


def test_columns_follow_declared_order(book_schema):
    jsx = render_frontend(book_schema)
    columns = jsx.split("const COLUMNS = [", 1)[1].split("];", 1)[0]
    names = [line.split('name: "', 1)[1].split('"', 1)[0] for line in columns.strip().splitlines()]
    assert names == ["id", "title", "author", "publication_year", "stock"]
    assert '{ name: "publication_year", label: "Publication Year", widget: "number-input" },' in columns


def test_disabling_update_removes_update_control(book_schema):
    """Test operation gating: no edit control without the update flag, other controls kept."""
    jsx = render_frontend(toggle_operation(book_schema, "update"))

    assert 'data-action="update"' not in jsx
    assert "startEdit" not in jsx
    assert "editingId" not in jsx
    assert 'data-action="delete"' in jsx
    assert 'data-action="create"' in jsx


def test_disabling_delete_and_create(book_schema):
    schema = toggle_operation(toggle_operation(book_schema, "delete"), "create")
    jsx = render_frontend(schema)

    assert 'data-action="delete"' not in jsx
    assert 'data-action="create"' not in jsx
    assert 'data-action="update"' in jsx
    assert "{editingId !== null && (" in jsx


def test_read_only_view_has_no_actions(book_schema):
    schema = book_schema
    for op in ("create", "update", "delete"):
        schema = toggle_operation(schema, op)
    jsx = render_frontend(schema)

    assert "data-action" not in jsx
    assert "<form" not in jsx
    assert "<th>Actions</th>" not in jsx
    assert "await fetch(API_URL)" in jsx


def test_widgets_by_type():
    schema = create_schema({
        "entityName": "Profile",
        "fields": [
            {"name": "nickname", "type": "string", "required": True},
            {"name": "age", "type": "number"},
            {"name": "active", "type": "boolean", "defaultValue": "true"},
            {"name": "born", "type": "date"},
            {"name": "contact", "type": "email"},
            {"name": "bio", "type": "text"},
        ],
    })
    jsx = render_frontend(schema)

    assert '<input type="text" name="nickname" value={form["nickname"]} onChange={handleChange} required />' in jsx
    assert '<input type="number" name="age"' in jsx
    assert '<input type="checkbox" name="active" checked={form["active"]}' in jsx
    assert '<input type="date" name="born"' in jsx
    assert '<input type="email" name="contact"' in jsx
    assert '<textarea name="bio"' in jsx
    assert '  "active": true,' in jsx
    assert 'const NUMBER_FIELDS = ["age"];' in jsx


def test_identity_field_not_in_form(book_schema):
    jsx = render_frontend(book_schema)
    empty_form = jsx.split("const EMPTY_FORM = {", 1)[1].split("};", 1)[0]
    assert '"id"' not in empty_form
    assert '  "stock": "0",' in empty_form
