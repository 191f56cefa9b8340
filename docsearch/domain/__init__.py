"""
Domain layer - Core entities and domain errors.

This layer contains the fundamental objects and rules,
independent of any infrastructure or framework concerns.
"""
