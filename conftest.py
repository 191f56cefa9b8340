"""
Root conftest.py for the document search service.

Pins the environment before the docsearch package is imported so the
global settings instance never picks up host configuration. This runs at
import time because initial conftests (tests/conftest.py) import the app
before any pytest_configure hook fires.
"""

import os

TEST_ENVIRONMENT = {
    "DOCUMENT_STORE": "memory",
    "LOG_LEVEL": "WARNING",
    "LOG_JSON": "false",
    "DEBUG": "true",
    "BASIC_AUTH_USERNAME": "",
    "BASIC_AUTH_PASSWORD": "",
    "BASIC_AUTH_PASSWORD_HASH": "",
    "COSMOSDB_CONNECTIONSTRING": "",
}

os.environ.update(TEST_ENVIRONMENT)
