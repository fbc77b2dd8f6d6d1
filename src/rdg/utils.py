import os


def get_relative_fn(fn: str):
    """Returns the path of a file relative to the script calling this function."""
    import inspect

    script_fn = inspect.currentframe().f_back.f_globals["__file__"]  # type: ignore
    dirname = os.path.dirname(script_fn)
    return os.path.join(dirname, fn)


def load_yaml(fn: str):
    """Returns the yaml data of the file provided."""
    import yaml

    with open(fn, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def split_paths(value: str | None) -> list[str]:
    """Splits an `os.pathsep` separated list of directories, dropping empties."""
    if not value:
        return []
    return [p for p in value.split(os.pathsep) if p]


__all__ = [
    "get_relative_fn",
    "load_yaml",
    "split_paths",
]
