from appgen.validators.engine import IssueCode, ValidationReport, run_validation, validate_schema

__all__ = ["IssueCode", "ValidationReport", "run_validation", "validate_schema"]
