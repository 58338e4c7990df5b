# tuiedit/integrations/FileStore.py
"""FileStore.py
================
Loading and saving documents as lists of lines.

Reading detects the encoding with ``chardet`` on a leading sample. A guess
with confidence >= 0.75 is tried strictly first, then UTF-8 and Latin-1,
and finally UTF-8 with replacement characters. The encoding that worked is
remembered per path (an ``ascii`` guess is recorded as UTF-8) so a later
save writes the file back the same way. Text the remembered encoding
cannot represent is saved as UTF-8 rather than lossily replaced.

Every failure surfaces as ``FileStoreError``; the editor turns it into a
status message.
"""

import codecs
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

import chardet

from tuiedit.utils.errors import TuieditError

logger = logging.getLogger("tuiedit")

PathLike = Union[str, os.PathLike]

CHARDET_SAMPLE_SIZE = 20 * 1024
CHARDET_MIN_CONFIDENCE = 0.75


class FileStoreError(TuieditError):
    """A document could not be read or written."""

    def __init__(self, path: PathLike, reason: str) -> None:
        super().__init__(f"{os.fspath(path)}: {reason}")
        self.path = os.fspath(path)
        self.reason = reason


def split_lines(content: str) -> list[str]:
    """Splits file content into editor lines. Empty content yields ``[""]``.

    Only ``\\n`` ends a line (a preceding ``\\r`` is dropped); form feeds and
    Unicode separators stay inside the line they appear in.
    """
    lines = [line.rstrip("\r") for line in content.split("\n")]
    if len(lines) > 1 and content.endswith("\n"):
        lines.pop()
    return lines


class FileStore:
    def __init__(self, default_encoding: str = "utf-8") -> None:
        self.default_encoding = default_encoding
        self._encodings: dict[str, str] = {}

    def encoding_for(self, path: PathLike) -> str:
        return self._encodings.get(os.path.abspath(os.fspath(path)), self.default_encoding)

    def _candidate_encodings(self, sample: bytes) -> list[tuple[str, str]]:
        result = chardet.detect(sample)
        guess: Optional[str] = result.get("encoding")
        confidence = result.get("confidence") or 0.0
        logger.debug("chardet guessed '%s' (confidence %.2f)", guess, confidence)

        candidates: list[tuple[str, str]] = []
        if guess and confidence >= CHARDET_MIN_CONFIDENCE:
            candidates.append((guess, "strict"))
        for fallback in (("utf-8", "strict"), ("latin-1", "strict")):
            if fallback not in candidates:
                candidates.append(fallback)
        candidates.append(("utf-8", "replace"))
        return candidates

    def load(self, path: PathLike) -> list[str]:
        file_path = Path(path).expanduser()
        if not file_path.exists():
            raise FileStoreError(file_path, "file not found")
        if file_path.is_dir():
            raise FileStoreError(file_path, "is a directory")

        try:
            raw = file_path.read_bytes()
        except OSError as e:
            raise FileStoreError(file_path, e.strerror or str(e)) from e

        if not raw:
            self._encodings[os.path.abspath(file_path)] = self.default_encoding
            return [""]

        for encoding, errors in self._candidate_encodings(raw[:CHARDET_SAMPLE_SIZE]):
            try:
                content = raw.decode(encoding, errors=errors)
            except (UnicodeDecodeError, LookupError) as e:
                logger.warning("Failed to decode '%s' as %s (%s): %s", file_path, encoding, errors, e)
                continue
            if codecs.lookup(encoding).name == "ascii":
                # ascii files are saved as utf-8
                encoding = "utf-8"
            self._encodings[os.path.abspath(file_path)] = encoding
            lines = split_lines(content)
            logger.info("Read '%s' as %s, %d lines", file_path, encoding, len(lines))
            return lines

        raise FileStoreError(file_path, "could not decode content")

    def save(self, path: PathLike, lines: list[str]) -> None:
        """Writes ``lines`` joined by newlines, atomically via a temp file."""
        file_path = Path(path).expanduser()
        encoding = self.encoding_for(file_path)
        content = "\n".join(lines)
        if content:
            content += "\n"

        try:
            data = content.encode(encoding)
        except UnicodeEncodeError as e:
            logger.warning(
                "'%s' cannot be written as %s (%s); saving as utf-8 instead", file_path, encoding, e.reason
            )
            encoding = "utf-8"
            data = content.encode(encoding)
        except LookupError as e:
            raise FileStoreError(file_path, f"unknown encoding {encoding!r}") from e

        directory = file_path.parent if str(file_path.parent) else Path(".")
        tmp_name: Optional[str] = None
        try:
            fd, tmp_name = tempfile.mkstemp(prefix=f".{file_path.name}.", dir=directory)
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
            if file_path.exists():
                os.chmod(tmp_name, file_path.stat().st_mode & 0o7777)
            os.replace(tmp_name, file_path)
            tmp_name = None
        except OSError as e:
            logger.error("Failed to write file '%s': %s", file_path, e, exc_info=True)
            raise FileStoreError(file_path, e.strerror or str(e)) from e
        finally:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)

        self._encodings[os.path.abspath(file_path)] = encoding
        logger.info("Wrote '%s' (%d lines, %s)", file_path, len(lines), encoding)
