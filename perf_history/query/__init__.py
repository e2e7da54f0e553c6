from .converter import query_to_slice
from .range_query import RangeQuery

__all__ = ['RangeQuery', 'query_to_slice']
