"""
Utility helpers for the format layer.
"""

from checklist_engine.formats.utils.markup_dialect import MarkupConfig, MarkupDialect

__all__ = [
    'MarkupConfig',
    'MarkupDialect',
]
