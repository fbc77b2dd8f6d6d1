import pytest

from rdg.tables import load_tables


@pytest.fixture(scope="session")
def tables():
    return load_tables()


@pytest.fixture
def compile_src(tables):
    """Compiles a source string with the bundled tables, returning the bytes."""
    from rdg.compiler import compile_text

    def _compile(src: str) -> bytes:
        return compile_text(src, tables).data

    return _compile
