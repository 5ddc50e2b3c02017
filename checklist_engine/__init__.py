"""
Checklist format conversion engine.

Translates checklist documents between external file formats (the proprietary
binary layout, the checklist binder JSON container, generic XML and the native
JSON save format) and the canonical in-memory document model.
"""

__version__ = "0.1.0"
