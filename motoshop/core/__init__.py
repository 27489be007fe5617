"""
Core domain layer.

Pure business rules (job lifecycle, access control) with no I/O.
"""
