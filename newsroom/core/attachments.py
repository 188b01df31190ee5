"""
Image Attachments
=================

Local handling of an image picked in the article form. The upload is
validated (size and declared type), staged to a temporary file while it is
read, and turned into a data URL that is both the preview and the value
submitted as the article's ``image``.
"""

import base64
import logging
import os
import shutil
import tempfile
from typing import Optional

logger = logging.getLogger(__name__)

MAX_IMAGE_BYTES = 10 * 1024 * 1024

TOO_LARGE_MESSAGE = 'File size must be less than 10MB'
NOT_IMAGE_MESSAGE = 'Please upload an image file'
READ_ERROR_MESSAGE = 'Error reading file. Please try again.'


class AttachmentError(ValueError):
    """An upload was rejected before reaching the API"""


class Preview:
    """A preview backed by embedded data or a remote URL; owns no handle"""

    owns_handle = False

    def __init__(self, url: str):
        self.url = url
        self.released = False

    def release(self):
        pass


class FilePreview(Preview):
    """A preview backed by a temporary local file that must be released"""

    owns_handle = True

    def __init__(self, path: str):
        super().__init__(path)
        self.path = path

    def release(self):
        if self.released:
            return
        self.released = True
        try:
            os.unlink(self.path)
        except FileNotFoundError:
            pass


def _stream_size(stream) -> int:
    position = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(position)
    return size


def _content_type(file) -> str:
    return getattr(file, 'mimetype', None) or getattr(file, 'content_type', None) or ''


class ImageAttachment:
    """Image value and preview for one article form.

    Args:
        image: the image already stored on the article (data URL or URL)
        max_bytes: size limit for new uploads
    """

    def __init__(self, image: Optional[str] = None, max_bytes: int = MAX_IMAGE_BYTES):
        self.value = image or ''
        self.max_bytes = max_bytes
        self.preview = Preview(image) if image else None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def _set_preview(self, preview):
        if self.preview is not None and self.preview is not preview:
            self.preview.release()
        self.preview = preview

    def validate(self, file):
        stream = getattr(file, 'stream', file)
        if _stream_size(stream) > self.max_bytes:
            raise AttachmentError(TOO_LARGE_MESSAGE)
        if not _content_type(file).startswith('image/'):
            raise AttachmentError(NOT_IMAGE_MESSAGE)

    def attach(self, file) -> str:
        """Validate ``file`` and make it the attached image.

        Returns the new data URL. Raises AttachmentError without touching the
        current value when the file is too large or not an image.
        """
        self.validate(file)
        content_type = _content_type(file)
        stream = getattr(file, 'stream', file)

        try:
            stream.seek(0)
            fd, path = tempfile.mkstemp(prefix='newsroom-preview-')
            self._set_preview(FilePreview(path))
            with os.fdopen(fd, 'wb') as staged:
                shutil.copyfileobj(stream, staged)

            with open(path, 'rb') as staged:
                encoded = base64.b64encode(staged.read()).decode('ascii')
        except OSError as e:
            logger.error(f"Error reading file: {e}")
            self._set_preview(None)
            raise AttachmentError(READ_ERROR_MESSAGE) from e

        self.value = f"data:{content_type};base64,{encoded}"
        # The embedded copy replaces the staged file as the preview
        self._set_preview(Preview(self.value))
        return self.value

    def clear(self):
        """Remove the image from the form"""
        self._set_preview(None)
        self.value = ''

    def close(self):
        """Release any preview handle; called when the form goes away"""
        self._set_preview(None)

    @property
    def preview_url(self):
        return self.preview.url if self.preview else None
