import pytest
from appgen.schemas.mutations import create_schema


BOOK_SCHEMA = {
    "entityName": "Book",
    "fields": [
        {"name": "id", "label": "ID", "type": "number", "required": True},
        {"name": "title", "label": "Title", "type": "string", "required": True},
        {"name": "author", "label": "Author", "type": "string", "required": True},
        {"name": "publication_year", "label": "Publication Year", "type": "number", "required": False},
        {"name": "stock", "label": "Stock", "type": "number", "required": False, "defaultValue": "0"},
    ],
    "operations": {"create": True, "read": True, "update": True, "delete": True},
}


@pytest.fixture
def book_schema():
    return create_schema(BOOK_SCHEMA)


def field_id(schema, name):
    return next(f.id for f in schema.fields if f.name == name)
