"""
Service layer - Orchestration of storage, retrieval and reading.
"""
