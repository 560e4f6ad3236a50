"""Studio content API core: credentials, tokens, schemas and JSON document storage"""

__version__ = "1.0.0"
