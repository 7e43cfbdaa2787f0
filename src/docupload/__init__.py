"""
docupload - Publish generated documentation from CI to a git branch
"""

__version__ = "0.1.0"

from .core import DocUploader, PublishError

__all__ = ["DocUploader", "PublishError"]
