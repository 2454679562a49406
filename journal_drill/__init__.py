"""
Bond Journal Drill - Source Package

An interactive drill tool for bond accounting journal entries.
Students record one journal entry per scenario; the engine checks it
against the canonical answer and tracks mastery across a session.

DESIGN PRINCIPLES:
1. Verification is a returned classification, never an exception
2. Progress state has one owner (the tracker)
3. Persistence never blocks the student
4. Every user action is audited
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Bond Journal Drill Team"
