"""Artifact compiler: maps a validated schema to the four-artifact bundle."""
import logging
from pathlib import Path
from typing import Dict, List
from appgen.core.errors import CompilationError
from appgen.generators.api import render_api
from appgen.generators.frontend import render_frontend
from appgen.generators.orm import render_orm
from appgen.generators.sql import render_sql
from appgen.generators.utils import to_pascal_case
from appgen.schemas.schema import GeneratedFiles, SchemaDefinition

log = logging.getLogger(__name__)


def compile_schema(schema: SchemaDefinition) -> GeneratedFiles:
    """
    Generate the SQL, ORM, API and frontend artifacts for a schema.

    Output is a pure function of ``schema``: the same schema always yields
    byte-identical artifacts. Callers must validate first.

    Raises:
        CompilationError: if any generator fails on the schema
    """
    try:
        files = GeneratedFiles(
            sql=render_sql(schema),
            orm=render_orm(schema),
            api=render_api(schema),
            frontend=render_frontend(schema),
        )
    except Exception as e:
        log.error("Compilation failed for entity %r: %s", schema.entity_name, e, exc_info=True)
        raise CompilationError(f"Failed to compile {schema.entity_name!r}: {e}") from e

    log.info(
        "Compiled %d fields for entity %r",
        len(schema.fields), schema.entity_name,
    )
    return files


def suggested_paths(schema: SchemaDefinition) -> Dict[str, str]:
    """Relative file path for each artifact, for downstream packaging."""
    return {
        "sql": "backend/sql/schema.sql",
        "orm": "backend/models.py",
        "api": "backend/app.py",
        "frontend": f"frontend/src/components/{to_pascal_case(schema.entity_name)}List.jsx",
    }


def write_artifacts(schema: SchemaDefinition, files: GeneratedFiles, root: Path) -> List[Path]:
    """Write each artifact under ``root`` at its suggested path. Returns the written paths."""
    written = []
    contents = files.as_dict()
    for key, rel_path in suggested_paths(schema).items():
        path = Path(root) / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(contents[key], encoding="utf-8")
        written.append(path)
    log.info("Wrote %d artifacts under %s", len(written), root)
    return written
