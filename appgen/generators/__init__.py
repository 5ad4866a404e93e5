from appgen.generators.compiler import compile_schema, suggested_paths, write_artifacts

__all__ = ["compile_schema", "suggested_paths", "write_artifacts"]
