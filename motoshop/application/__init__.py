"""
Application layer: use case orchestration over the job lifecycle core.
"""
