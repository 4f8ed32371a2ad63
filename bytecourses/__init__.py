"""ByteCourses course proposal review backend."""

__version__ = "1.0.0"
