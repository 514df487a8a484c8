# debatecoach/uploads.py
"""
Transient audio uploads for speech-to-text.

`save_upload` writes the incoming multipart file under a unique temp name;
`receive_and_transcribe` owns that file from then on and always removes it.
"""
import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from typing import BinaryIO, Optional, Protocol

from debatecoach.errors import MissingFile, ServiceNotConfigured, TooSmall, TranscriptionFailed, UpstreamError

logger = logging.getLogger(__name__)

MIN_AUDIO_BYTES = 2500
DEFAULT_EXT = ".wav"

# first match wins
MEDIA_TYPE_EXTENSIONS = (
    (("wav",), ".wav"),
    (("mpeg", "mp3"), ".mp3"),
    (("mp4", "m4a"), ".m4a"),
    (("ogg",), ".ogg"),
    (("webm",), ".webm"),
)


class Transcriber(Protocol):
    def transcribe(self, path: str, language: str = "en") -> str: ...


@dataclass
class StoredUpload:
    path: str
    filename: str = ""
    content_type: str = ""


def save_upload(stream: BinaryIO, tmp_dir: str, filename: Optional[str] = None,
                content_type: Optional[str] = None) -> StoredUpload:
    os.makedirs(tmp_dir, exist_ok=True)
    fd, path = tempfile.mkstemp(dir=tmp_dir)
    try:
        with os.fdopen(fd, "wb") as out:
            shutil.copyfileobj(stream, out)
    except BaseException:
        _remove_quietly(path)
        raise
    return StoredUpload(path=path, filename=filename or "", content_type=content_type or "")


def ext_from_upload(filename: Optional[str], content_type: Optional[str]) -> str:
    """Extension from the declared filename, else guessed from the media type, else .wav."""
    by_name = os.path.splitext((filename or "").lower())[1]
    if by_name:
        return by_name

    media_type = (content_type or "").lower()
    for needles, ext in MEDIA_TYPE_EXTENSIONS:
        if any(n in media_type for n in needles):
            return ext
    return DEFAULT_EXT


def _remove_quietly(path: str) -> None:
    try:
        os.remove(path)
    except OSError:
        logger.warning("[stt] Failed to delete temp file %s", path)


def receive_and_transcribe(upload: Optional[StoredUpload], transcriber: Transcriber,
                           language: str = "en") -> str:
    if upload is None:
        raise MissingFile()

    tmp_path = upload.path
    final_path = None
    try:
        candidate = tmp_path + ext_from_upload(upload.filename, upload.content_type)
        os.rename(tmp_path, candidate)
        final_path = candidate

        size = os.path.getsize(final_path)
        if size < MIN_AUDIO_BYTES:
            raise TooSmall(size)

        return transcriber.transcribe(final_path, language=language) or ""
    except (TooSmall, ServiceNotConfigured):
        raise
    except UpstreamError as exc:
        raise TranscriptionFailed(exc.details or exc.message, status_code=exc.status_code) from exc
    except Exception as exc:
        raise TranscriptionFailed(str(exc) or exc.__class__.__name__,
                                  status_code=getattr(exc, "status_code", None)) from exc
    finally:
        if final_path and os.path.exists(final_path):
            _remove_quietly(final_path)
        elif os.path.exists(tmp_path):
            _remove_quietly(tmp_path)
