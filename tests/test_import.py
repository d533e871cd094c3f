"""Verify package imports work correctly."""


def test_import_bloques() -> None:
    """Test that bloques can be imported and version matches pyproject."""
    import tomllib
    from pathlib import Path

    import bloques

    with (Path(__file__).resolve().parent.parent / "pyproject.toml").open("rb") as f:
        expected = tomllib.load(f)["project"]["version"]
    assert bloques.__version__ == expected


def test_version_format() -> None:
    """Test version string format."""
    from bloques import __version__

    parts = __version__.split(".")
    assert len(parts) == 3
    assert all(part.isdigit() for part in parts)


def test_public_api_exports_resolve() -> None:
    import bloques

    for name in bloques.__all__:
        assert hasattr(bloques, name), name
