from .date_index import DateIndexStrategy, index_in

__all__ = ['DateIndexStrategy', 'index_in']
