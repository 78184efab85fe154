"""Paths for shipped schema definitions. Resolved from the package location."""

from pathlib import Path

SCHEMAS_DIRNAME = "schemas"
SCHEMA_SUFFIX = ".xsd"


def get_package_root() -> Path:
    """Return the installed conxml package directory."""
    return Path(__file__).resolve().parent


def get_schema_dir() -> Path:
    """Return the directory holding the shipped <schema_id>.xsd files."""
    return get_package_root() / SCHEMAS_DIRNAME


def resolve_schema_path(schema_dir: Path, schema_id: str) -> Path:
    """
    Resolve <schema_id>.xsd under schema_dir. Raises ValueError if the resolved
    path escapes schema_dir. Never consults the process working directory.
    """
    schema_dir = schema_dir.resolve()
    resolved = (schema_dir / f"{schema_id}{SCHEMA_SUFFIX}").resolve()
    try:
        resolved.relative_to(schema_dir)
    except ValueError:
        raise ValueError(
            f"Schema path escapes schema dir: {schema_id!r} -> {resolved!s}"
        ) from None
    return resolved
