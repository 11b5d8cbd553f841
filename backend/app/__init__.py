"""
This is the main package for the chassis extraction backend.

It contains subpackages for:
- api: API endpoints, dependencies and response mapping
- core: configuration and exceptions
- models: data models
- services: chassis extraction, OCR and image storage
- validation: upload screening
"""

__version__ = "1.0.0"
