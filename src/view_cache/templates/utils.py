"""
Template naming helpers.
"""
import os


def _to_forward_slashes(path: str) -> str:
    return os.fspath(path).replace("\\", "/")


def derive_template_name(root: str, path: str) -> str:
    """
    Derive the logical template name of a file below root.

    The name is the path relative to root with every separator normalized
    to a forward slash, so ``views/a/b.html`` under ``views`` is ``a/b.html``
    on every platform.

    Args:
        root: Template root directory
        path: Path of a file below root

    Returns:
        Forward-slash separated template name
    """
    root_norm = _to_forward_slashes(root).rstrip("/")
    path_norm = _to_forward_slashes(path)

    if root_norm and path_norm.startswith(root_norm + "/"):
        return path_norm[len(root_norm) + 1:].lstrip("/")

    return _to_forward_slashes(os.path.relpath(path, root))
