"""
Core cross-cutting concerns (authentication).
"""
