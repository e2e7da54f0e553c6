from .run_store import RunStore, RunStoreBuilder

__all__ = ['RunStore', 'RunStoreBuilder']
