#!/usr/bin/env python3
"""
Run one Prompt -> Mockup -> Report session from the command line and write
the generated artifacts to disk.

Usage: python scripts/run_workflow.py "Manage a library of books" --entity-name Book --out ./generated
"""
import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from appgen.core.config import settings
from appgen.core.controller import WorkflowController
from appgen.core.logging import configure_logging
from appgen.generators import write_artifacts
from appgen.interpreters import build_interpreter
from appgen.interpreters.base import InterpretationParams
from appgen.schemas.schema import Operation


async def run_workflow(prompt: str, entity_name: str, operations, out_dir: Path, paginate: bool = False) -> int:
    """Drive the controller through submit and confirm. Returns a process exit code."""
    ctl = WorkflowController(interpreter=build_interpreter(settings), settings=settings)

    params = InterpretationParams(entity_name=entity_name, operations=set(operations))
    if not await ctl.submit(prompt, params):
        print(f"Interpretation failed: {ctl.error}")
        return 1

    print(f"Schema for {ctl.schema.entity_name}:")
    for field in ctl.schema.fields:
        flags = " required" if field.required else ""
        default = f" default={field.default_value}" if field.default_value is not None else ""
        print(f"  {field.name}: {field.type}{flags}{default}")
    print()

    if paginate:
        ctl.set_pagination(True)

    result = await ctl.confirm()
    for warning in result.warnings:
        print(f"WARNING [{warning.code}] {warning.message}")
    if not result.success:
        for error in result.errors:
            print(f"ERROR [{error.code}] {error.message}")
        return 1

    for path in write_artifacts(ctl.schema, result.generated_files, out_dir):
        print(f"Wrote {path}")
    return 0


def main():
    parser = argparse.ArgumentParser(description="Generate a CRUD app from a natural-language prompt")
    parser.add_argument("prompt", help="Description of the app to generate")
    parser.add_argument("--entity-name", default=None, help="Entity name hint")
    parser.add_argument(
        "--operations",
        default="create,read,update,delete",
        help="Comma-separated CRUD operations to enable",
    )
    parser.add_argument("--paginate", action="store_true", help="Paginate list reads")
    parser.add_argument("--out", default="generated", help="Output directory")
    args = parser.parse_args()

    try:
        operations = [Operation(op.strip()) for op in args.operations.split(",") if op.strip()]
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(2)

    configure_logging(settings.log_level)
    sys.exit(asyncio.run(run_workflow(args.prompt, args.entity_name, operations, Path(args.out), args.paginate)))


if __name__ == "__main__":
    main()
