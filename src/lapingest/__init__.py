"""
lapingest: Input collection loading for learning analytics pipelines.

This package decides which input collections (personal, course,
enrollment, grade, activity) must be loaded into a temporary store,
dispatches them to pluggable source handlers and tracks what has
already been loaded.
"""

from importlib.metadata import version

__version__ = version("lapingest")

__all__ = ["__version__"]
