"""
Command line interface for the checklist engine.
"""
