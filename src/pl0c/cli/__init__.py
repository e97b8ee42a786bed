"""
pl0c Command-Line Interface
===========================

- **pl0c**: compile a PL/0 source file to C on standard output

Implemented as a Click application.
"""

__all__ = ["pl0c"]
