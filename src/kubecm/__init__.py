"""kubecm: deterministic helm release deployment."""

__version__ = "0.1.0"
