"""Top-level package for the Clue Set Toolkit.

Provides subpackages:
- clueset_toolkit.core – immutable clue set models, schema and serialization
- clueset_toolkit.ingest – CSV tokenizer, parser, structure validator and tree builder
- clueset_toolkit.upload – upload workflow and Clue Store implementations
- clueset_toolkit.cli – command-line entry point
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        for line in pyproject.read_text(encoding="utf-8").splitlines():
            if line.strip().startswith("version"):
                # Parse: version = "0.1.0"
                return line.split("=")[1].strip().strip('"').strip("'")

    from importlib.metadata import version as pkg_version, PackageNotFoundError
    try:
        return pkg_version("clueset-toolkit")
    except PackageNotFoundError:
        return "0.0.0"

__version__ = _get_version()
__all__: list[str] = ["__version__"]
