"""
Input collection loading.

The orchestrator decides which collections to load, handlers read them
from their sources into the temporary store, and the load state records
what has been loaded.
"""
