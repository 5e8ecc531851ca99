"""
Test utilities for the cloudwatch-transport project.
"""

from .upload_stubs import RecordingUpload

__all__ = ['RecordingUpload']
