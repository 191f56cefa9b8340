"""
docsearch - REST service for document storage, keyword search and
extractive question answering.
"""

__version__ = "1.0.0"
