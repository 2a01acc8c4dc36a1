# =============================================================================
# Record Archiver Shared Libraries
# =============================================================================
# This package contains shared libraries for the Record Archiver pipeline.
# See individual sub-packages for detailed documentation.
# =============================================================================

"""
Record Archiver shared libraries.

Sub-packages:
- models: Pydantic data models and settings
- archiving: Export-and-purge core (filter, cursor, archiver, purger, runner)
"""

__version__ = "0.1.0"
