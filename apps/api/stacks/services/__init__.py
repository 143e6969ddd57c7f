from .reconcile import Reconciler, SqlProfileStore

__all__ = ["Reconciler", "SqlProfileStore"]
