"""
Motorcycle repair shop backend.

Job intake, photo-evidenced job lifecycle, shop membership and
role-based job visibility on top of a generic data access gateway.
"""
