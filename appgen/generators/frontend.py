"""Frontend generator: a React listing component for one entity."""
from typing import List
from appgen.generators.types import coerce_default, get_mapping
from appgen.generators.utils import (
    IDENTITY_COLUMN,
    entity_to_path,
    js_string,
    split_identity,
    to_pascal_case,
)
from appgen.schemas.schema import FieldDefinition, SchemaDefinition


def _label(field: FieldDefinition) -> str:
    return field.label or field.name


def _initial_value(field: FieldDefinition) -> str:
    """Initial form value as a JS literal."""
    if field.type == "boolean":
        if field.default_value is None:
            return "false"
        return "true" if coerce_default(field.type, field.default_value) else "false"
    return js_string(field.default_value or "")


def render_widget(field: FieldDefinition) -> List[str]:
    """JSX lines for one form control, picked by the field's widget kind."""
    mapping = get_mapping(field.type)
    name = js_string(field.name)
    required = " required" if field.required else ""
    label = f"        <label>{{{js_string(_label(field))}}}"

    if mapping.widget == "checkbox":
        control = f"          <input type=\"checkbox\" name={name} checked={{form[{name}]}} onChange={{handleChange}} />"
    elif mapping.widget == "textarea":
        control = f"          <textarea name={name} value={{form[{name}]}} onChange={{handleChange}}{required} />"
    else:
        control = (
            f"          <input type=\"{mapping.input_type}\" name={name} "
            f"value={{form[{name}]}} onChange={{handleChange}}{required} />"
        )
    return [label, control, "        </label>"]


def render_frontend(schema: SchemaDefinition) -> str:
    """Generate the ``<Entity>List.jsx`` component."""
    entity = to_pascal_case(schema.entity_name)
    component = f"{entity}List"
    ops = schema.operations
    _, data_fields = split_identity(schema)
    has_form = ops.create or ops.update
    row_actions = ops.update or ops.delete

    lines = [
        'import { useEffect, useState } from "react";',
        "",
        f'const API_URL = "/{entity_to_path(schema.entity_name)}";',
        "",
        "const COLUMNS = [",
    ]
    for field in schema.fields:
        lines.append(
            f"  {{ name: {js_string(field.name)}, label: {js_string(_label(field))}, "
            f"widget: \"{get_mapping(field.type).widget}\" }},"
        )
    lines.append("];")
    lines.append("")

    if has_form:
        lines.append("const EMPTY_FORM = {")
        for field in data_fields:
            lines.append(f"  {js_string(field.name)}: {_initial_value(field)},")
        lines.append("};")
        lines.append("")
        numeric = ", ".join(js_string(f.name) for f in data_fields if f.type == "number")
        lines.append(f"const NUMBER_FIELDS = [{numeric}];")
        lines.append("")
        lines.append("function toPayload(form) {")
        lines.append("  const payload = {};")
        lines.append("  for (const [key, value] of Object.entries(form)) {")
        lines.append('    if (value === "") continue;')
        lines.append("    payload[key] = NUMBER_FIELDS.includes(key) ? Number(value) : value;")
        lines.append("  }")
        lines.append("  return payload;")
        lines.append("}")
        lines.append("")

    lines.append("function formatValue(value) {")
    lines.append('  if (value === null || value === undefined) return "";')
    lines.append('  if (typeof value === "boolean") return value ? "Yes" : "No";')
    lines.append("  return String(value);")
    lines.append("}")
    lines.append("")
    lines.append(f"export default function {component}() {{")
    lines.append("  const [items, setItems] = useState([]);")
    lines.append("  const [error, setError] = useState(null);")
    if has_form:
        lines.append("  const [form, setForm] = useState(EMPTY_FORM);")
    if ops.update:
        lines.append("  const [editingId, setEditingId] = useState(null);")
    lines.append("")

    if ops.read:
        lines.append("  async function load() {")
        lines.append("    try {")
        lines.append("      const response = await fetch(API_URL);")
        lines.append("      if (!response.ok) throw new Error(`Request failed: ${response.status}`);")
        lines.append("      setItems(await response.json());")
        lines.append("    } catch (err) {")
        lines.append("      setError(err.message);")
        lines.append("    }")
        lines.append("  }")
        lines.append("")
        lines.append("  useEffect(() => {")
        lines.append("    load();")
        lines.append("  }, []);")
        lines.append("")

    if has_form:
        lines.append("  function handleChange(event) {")
        lines.append("    const { name, type, value, checked } = event.target;")
        lines.append('    setForm((prev) => ({ ...prev, [name]: type === "checkbox" ? checked : value }));')
        lines.append("  }")
        lines.append("")
        lines.append("  async function handleSubmit(event) {")
        lines.append("    event.preventDefault();")
        if ops.update and ops.create:
            lines.append("    const url = editingId === null ? API_URL : `${API_URL}/${editingId}`;")
            lines.append('    const method = editingId === null ? "POST" : "PUT";')
        elif ops.update:
            lines.append("    if (editingId === null) return;")
            lines.append("    const url = `${API_URL}/${editingId}`;")
            lines.append('    const method = "PUT";')
        else:
            lines.append("    const url = API_URL;")
            lines.append('    const method = "POST";')
        lines.append("    const response = await fetch(url, {")
        lines.append("      method,")
        lines.append('      headers: { "Content-Type": "application/json" },')
        lines.append("      body: JSON.stringify(toPayload(form)),")
        lines.append("    });")
        lines.append("    if (!response.ok) {")
        lines.append("      setError(`Save failed: ${response.status}`);")
        lines.append("      return;")
        lines.append("    }")
        lines.append("    const saved = await response.json();")
        if ops.update and ops.create:
            lines.append("    setItems((prev) =>")
            lines.append("      editingId === null ? [...prev, saved] : prev.map((item) => (item.id === saved.id ? saved : item))")
            lines.append("    );")
        elif ops.update:
            lines.append("    setItems((prev) => prev.map((item) => (item.id === saved.id ? saved : item)));")
        else:
            lines.append("    setItems((prev) => [...prev, saved]);")
        if ops.update:
            lines.append("    setEditingId(null);")
        lines.append("    setForm(EMPTY_FORM);")
        lines.append("  }")
        lines.append("")

    if ops.update:
        lines.append("  function startEdit(item) {")
        lines.append("    const next = { ...EMPTY_FORM };")
        lines.append("    for (const key of Object.keys(EMPTY_FORM)) {")
        lines.append('      next[key] = item[key] ?? EMPTY_FORM[key];')
        lines.append("    }")
        lines.append("    setEditingId(item.id);")
        lines.append("    setForm(next);")
        lines.append("  }")
        lines.append("")

    if ops.delete:
        lines.append("  async function handleDelete(id) {")
        lines.append('    const response = await fetch(`${API_URL}/${id}`, { method: "DELETE" });')
        lines.append("    if (!response.ok) {")
        lines.append("      setError(`Delete failed: ${response.status}`);")
        lines.append("      return;")
        lines.append("    }")
        lines.append("    setItems((prev) => prev.filter((item) => item.id !== id));")
        lines.append("  }")
        lines.append("")

    lines.append("  return (")
    lines.append(f'    <div className="{entity_to_path(schema.entity_name)}-list">')
    lines.append(f"      <h2>{{{js_string(entity)}}}</h2>")
    lines.append('      {error && <p className="error">{error}</p>}')
    lines.append("      <table>")
    lines.append("        <thead>")
    lines.append("          <tr>")
    lines.append("            {COLUMNS.map((column) => (")
    lines.append("              <th key={column.name}>{column.label}</th>")
    lines.append("            ))}")
    if row_actions:
        lines.append("            <th>Actions</th>")
    lines.append("          </tr>")
    lines.append("        </thead>")
    lines.append("        <tbody>")
    lines.append("          {items.map((item) => (")
    lines.append(f"            <tr key={{item.{IDENTITY_COLUMN}}}>")
    lines.append("              {COLUMNS.map((column) => (")
    lines.append("                <td key={column.name}>{formatValue(item[column.name])}</td>")
    lines.append("              ))}")
    if row_actions:
        lines.append("              <td>")
        if ops.update:
            lines.append('                <button type="button" data-action="update" onClick={() => startEdit(item)}>')
            lines.append("                  Edit")
            lines.append("                </button>")
        if ops.delete:
            lines.append(
                f'                <button type="button" data-action="delete" '
                f"onClick={{() => handleDelete(item.{IDENTITY_COLUMN})}}>"
            )
            lines.append("                  Delete")
            lines.append("                </button>")
        lines.append("              </td>")
    lines.append("            </tr>")
    lines.append("          ))}")
    lines.append("        </tbody>")
    lines.append("      </table>")

    if has_form:
        if ops.create:
            lines.append("      <form onSubmit={handleSubmit}>")
        else:
            lines.append("      {editingId !== null && (")
            lines.append("      <form onSubmit={handleSubmit}>")
        for field in data_fields:
            lines.extend(render_widget(field))
        if ops.create and ops.update:
            lines.append('        <button type="submit" data-action={editingId === null ? "create" : "save"}>')
            lines.append('          {editingId === null ? "Create" : "Save"}')
            lines.append("        </button>")
        elif ops.create:
            lines.append('        <button type="submit" data-action="create">')
            lines.append("          Create")
            lines.append("        </button>")
        else:
            lines.append('        <button type="submit" data-action="save">')
            lines.append("          Save")
            lines.append("        </button>")
        lines.append("      </form>")
        if not ops.create:
            lines.append("      )}")

    lines.append("    </div>")
    lines.append("  );")
    lines.append("}")

    return "\n".join(lines) + "\n"
