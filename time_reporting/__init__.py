"""
Time reporting backend.
Time entry lifecycle: approval workflow, per-project validation and
hierarchical ACL authorization.
"""

__version__ = "1.0.0"
