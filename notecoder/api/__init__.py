"""
Note Coding API

FastAPI-based REST API for clinical note validation.
"""

from .main import create_app, NoteCoderAPI

__all__ = ["create_app", "NoteCoderAPI"]
