"""quickstart package initializer

Each module is a self-contained sample that can be run with
``python -m quickstart.<module>`` once ``ATLAS_URI`` points at a cluster.
Run ``quickstart.create_collections`` first so the episode validator used by
the transaction sample is in place.
"""

__all__ = [
    "aggregation",
    "change_streams",
    "connect_db",
    "create_collections",
    "creating",
    "deleting",
    "models",
    "retrieving",
    "schema",
    "transactions",
    "updating",
]
