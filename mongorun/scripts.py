"""Script source reading: existence checks, gzip detection and decoding."""

from __future__ import annotations

import codecs
import gzip
import io
import locale
import logging
import os
from pathlib import Path

from .errors import ConfigurationError, ScriptReadError
from .models import ScriptFile

LOG = logging.getLogger(__name__)


class ScriptSourceReader:
    """Decodes script files into a single newline-joined text blob."""

    def __init__(self, encoding: str | None = None) -> None:
        self._encoding = encoding.strip() if encoding and encoding.strip() else None
        if self._encoding is not None:
            try:
                codecs.lookup(self._encoding)
            except LookupError as exc:
                raise ConfigurationError(f"Unsupported script encoding: {self._encoding}") from exc

    @property
    def encoding(self) -> str | None:
        return self._encoding

    def script_for(self, path: Path) -> ScriptFile:
        return ScriptFile(path=path, encoding=self._encoding)

    def read(self, script: ScriptFile | Path) -> str:
        """Return the script text, each line prefixed with ``\\n``."""

        if isinstance(script, Path):
            script = self.script_for(script)
        path = script.path
        if not path.is_file() or not os.access(path, os.R_OK):
            raise ScriptReadError(f"{script.name} is not a file")

        encoding = self._select_encoding(script)
        parts: list[str] = []
        try:
            with path.open("rb") as raw:
                stream = raw
                if script.is_compressed:
                    LOG.info(" file is gz compressed, using gzip stream")
                    stream = gzip.GzipFile(fileobj=raw, mode="rb")
                with io.TextIOWrapper(stream, encoding=encoding, errors="replace", newline=None) as text:
                    for line in text:
                        parts.append("\n")
                        parts.append(line.rstrip("\n"))
        except (gzip.BadGzipFile, EOFError) as exc:
            raise ScriptReadError(f"Unable to decompress {script.name}: {exc}") from exc
        except OSError as exc:
            raise ScriptReadError(f"Unable to read {script.name}: {exc}") from exc
        return "".join(parts)

    def _select_encoding(self, script: ScriptFile) -> str:
        if script.encoding:
            try:
                codecs.lookup(script.encoding)
            except LookupError as exc:
                raise ConfigurationError(f"Unsupported script encoding: {script.encoding}") from exc
            LOG.info("Using %s for script encoding", script.encoding)
            return script.encoding
        fallback = locale.getpreferredencoding(False)
        LOG.warning("Using system default (%s) for script encoding", fallback)
        return fallback


__all__ = ["ScriptSourceReader"]
