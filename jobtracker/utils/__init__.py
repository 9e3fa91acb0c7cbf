"""
Utilities - upload validation and PDF text extraction.
"""
