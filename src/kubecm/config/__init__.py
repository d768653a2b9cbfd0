"""Release configuration: the request model and its loaders."""

from .env import load_env_file, substitute_env_vars
from .loader import build_release_request, load_release_request, read_release_file
from .request import ReleaseRequest

__all__ = [
    "ReleaseRequest",
    "build_release_request",
    "load_release_request",
    "read_release_file",
    "load_env_file",
    "substitute_env_vars",
]
