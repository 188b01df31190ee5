"""
Image attachment tests: size and type checks, data URL encoding, and
release of the staged preview file.
"""

import base64
import io
import os
import tempfile

import pytest
from werkzeug.datastructures import FileStorage

from newsroom.core.attachments import (
    ImageAttachment, AttachmentError, FilePreview, Preview, MAX_IMAGE_BYTES,
    TOO_LARGE_MESSAGE, NOT_IMAGE_MESSAGE, READ_ERROR_MESSAGE,
)

PNG_BYTES = b'\x89PNG\r\n\x1a\n' + b'\x00' * 32


def upload(data, content_type='image/png', filename='photo.png'):
    return FileStorage(stream=io.BytesIO(data), filename=filename, content_type=content_type)


@pytest.fixture
def staged_paths(monkeypatch):
    """Record every temporary file the attachment stages"""
    paths = []
    real_mkstemp = tempfile.mkstemp

    def recording_mkstemp(*args, **kwargs):
        fd, path = real_mkstemp(*args, **kwargs)
        paths.append(path)
        return fd, path

    monkeypatch.setattr(tempfile, 'mkstemp', recording_mkstemp)
    return paths


def test_valid_image_becomes_data_url():
    attachment = ImageAttachment()

    value = attachment.attach(upload(PNG_BYTES))

    assert value == 'data:image/png;base64,' + base64.b64encode(PNG_BYTES).decode('ascii')
    assert attachment.value == value
    assert attachment.preview_url == value


def test_image_exactly_at_limit_is_accepted():
    attachment = ImageAttachment(max_bytes=64)
    attachment.attach(upload(b'x' * 64))
    assert attachment.value.startswith('data:image/png;base64,')


def test_oversized_image_rejected_and_value_unchanged():
    attachment = ImageAttachment('https://cdn.example.com/old.png')

    with pytest.raises(AttachmentError) as exc:
        attachment.attach(upload(b'\x00' * (MAX_IMAGE_BYTES + 1)))

    assert str(exc.value) == TOO_LARGE_MESSAGE
    assert attachment.value == 'https://cdn.example.com/old.png'


@pytest.mark.parametrize("content_type", ['application/pdf', 'text/plain', ''])
def test_non_image_rejected(content_type):
    attachment = ImageAttachment()

    with pytest.raises(AttachmentError) as exc:
        attachment.attach(upload(b'%PDF-1.4', content_type=content_type, filename='doc.pdf'))

    assert str(exc.value) == NOT_IMAGE_MESSAGE
    assert attachment.value == ''
    assert attachment.preview is None


def test_staged_file_released_once_encoded(staged_paths):
    attachment = ImageAttachment()
    attachment.attach(upload(PNG_BYTES))

    assert len(staged_paths) == 1
    assert not os.path.exists(staged_paths[0])
    assert attachment.preview.owns_handle is False


def test_replacing_image_stages_a_fresh_file(staged_paths):
    attachment = ImageAttachment()
    attachment.attach(upload(PNG_BYTES))
    attachment.attach(upload(b'GIF89a', content_type='image/gif', filename='x.gif'))

    assert len(staged_paths) == 2
    assert not any(os.path.exists(p) for p in staged_paths)
    assert attachment.value.startswith('data:image/gif;base64,')


class BrokenStream(io.BytesIO):
    def read(self, *args):
        raise OSError('disk gone')


def test_read_error_clears_preview_and_releases_file(staged_paths):
    attachment = ImageAttachment('https://cdn.example.com/old.png')
    broken = FileStorage(stream=BrokenStream(PNG_BYTES), filename='p.png', content_type='image/png')

    with pytest.raises(AttachmentError) as exc:
        attachment.attach(broken)

    assert str(exc.value) == READ_ERROR_MESSAGE
    assert attachment.preview is None
    assert not os.path.exists(staged_paths[0])


def test_clear_removes_image():
    attachment = ImageAttachment('data:image/png;base64,AA==')
    attachment.clear()
    assert attachment.value == ''
    assert attachment.preview_url is None


def test_file_preview_release_is_idempotent():
    fd, path = tempfile.mkstemp()
    os.close(fd)
    preview = FilePreview(path)

    preview.release()
    preview.release()

    assert preview.released
    assert not os.path.exists(path)


def test_data_preview_owns_nothing():
    preview = Preview('data:image/png;base64,AA==')
    preview.release()
    assert preview.released is False


def test_context_manager_closes_preview():
    with ImageAttachment('https://cdn.example.com/a.png') as attachment:
        assert attachment.preview_url == 'https://cdn.example.com/a.png'
    assert attachment.preview is None
    assert attachment.value == 'https://cdn.example.com/a.png'
