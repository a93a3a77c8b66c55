"""Domain value objects.

Immutable values passed from the router to controller handlers.
"""

from src.domain.value_objects.uploaded_file import UploadedFile

__all__ = ["UploadedFile"]
