"""
Tasks Module - Black Box Interface

Purpose: Keep task search requests and responses small
Interface: optimize_search_params(), filter_search_result()
Hidden: Field selection and truncation rules
"""

from .search import filter_search_result, optimize_search_params, slim_task

__all__ = ["optimize_search_params", "filter_search_result", "slim_task"]
