"""
Node bootstrap modules.
"""
from .bootstrap import NodeBootstrapper, resolve_parameters

__all__ = [
    'NodeBootstrapper',
    'resolve_parameters',
]
