"""wable: incremental Workable jobs/candidates mirror."""

__version__ = "1.0.0"
