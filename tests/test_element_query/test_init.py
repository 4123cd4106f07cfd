"""Test module for element_query package initialization."""


def test_package_import() -> None:
    """Test that the package can be imported successfully."""
    # Arrange & Act
    import element_query

    # Assert
    assert element_query is not None


def test_package_has_version() -> None:
    """Test that the package has a version attribute."""
    # Arrange & Act
    import element_query

    # Assert
    assert isinstance(element_query.__version__, str)
    assert element_query.__version__ == "0.1.0"


def test_package_has_author() -> None:
    """Test that the package has an author attribute."""
    # Arrange & Act
    import element_query

    # Assert
    assert element_query.__author__ == "Element Query Team"


def test_package_all_exports() -> None:
    """Test that every name in __all__ is importable."""
    # Arrange & Act
    import element_query

    # Assert
    for name in element_query.__all__:
        assert hasattr(element_query, name), name
    assert "Element" in element_query.__all__
    assert "InvalidPathSyntaxError" in element_query.__all__
