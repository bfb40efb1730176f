import errno
import logging
from contextlib import ExitStack
from typing import Iterator, Optional

import dnaio
from xopen import xopen

from .errors import FormatError
from .qualities import QualityFormat
from .reads import Read

try:
    import resource
except ImportError:
    # Windows
    resource = None  # type: ignore

logger = logging.getLogger(__name__)

# Extra file descriptors requested when the soft limit is hit
OPEN_FILES_INCREMENT = 8


def _raise_soft_open_files_limit() -> bool:
    """Return whether the soft limit for open files could be raised"""
    if resource is None:
        return False
    soft, hard = resource.getrlimit(resource.RLIMIT_NOFILE)
    if soft >= hard:
        return False
    resource.setrlimit(
        resource.RLIMIT_NOFILE, (min(soft + OPEN_FILES_INCREMENT, hard), hard)
    )
    return True


class FileOpener:
    """
    Open (possibly compressed) files with xopen. Writers compress with the
    configured level. If the process runs out of file descriptors, the soft
    limit is raised once and the file is opened again.
    """

    def __init__(self, compression_level: int = 6):
        self.compression_level = compression_level

    def xopen(self, path, mode):
        kwargs = dict(threads=0)
        if "w" in mode:
            kwargs["compresslevel"] = self.compression_level
        try:
            f = xopen(path, mode, **kwargs)
        except OSError as e:
            if e.errno != errno.EMFILE or not _raise_soft_open_files_limit():
                raise
            logger.debug("Raised limit of open files while opening '%s'", path)
            f = xopen(path, mode, **kwargs)
        logger.debug("Opened '%s' in mode '%s': %s", path, mode, f)
        return f


class FastqReader:
    """
    Read FASTQ records from a (possibly compressed) file and convert them to
    Read objects with Phred+33 qualities.

    Malformed or truncated input raises FormatError, whether the problem is
    found when the file is opened or while iterating over it.
    """

    def __init__(
        self,
        path: str,
        quality_format: QualityFormat,
        opener: Optional[FileOpener] = None,
    ):
        self.path = path
        self._quality_format = quality_format
        self._opener = opener if opener is not None else FileOpener()
        try:
            # dnaio parses the first record while opening
            self._reader = dnaio.open(
                path, mode="r", fileformat="fastq", opener=self._opener.xopen
            )
        except (dnaio.FileFormatError, EOFError) as e:
            raise FormatError(f"{path}: {e}") from e

    def __repr__(self):
        return f"FastqReader(path={self.path!r}, quality_format={self._quality_format})"

    def __iter__(self) -> Iterator[Read]:
        records = iter(self._reader)
        while True:
            try:
                record = next(records)
            except StopIteration:
                return
            except (dnaio.FileFormatError, EOFError) as e:
                # EOFError: compressed input ended prematurely
                raise FormatError(f"{self.path}: {e}") from e
            yield Read.from_record(record, self._quality_format)

    def close(self) -> None:
        self._reader.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


class FastqWriter:
    """Write Read objects as FASTQ in the given quality encoding"""

    def __init__(
        self,
        path: str,
        quality_format: QualityFormat,
        opener: Optional[FileOpener] = None,
    ):
        self.path = path
        self._quality_format = quality_format
        self._opener = opener if opener is not None else FileOpener()
        self._writer = dnaio.open(
            path, mode="w", fileformat="fastq", qualities=True, opener=self._opener.xopen
        )

    def __repr__(self):
        return f"FastqWriter(path={self.path!r}, quality_format={self._quality_format})"

    def write(self, read: Read) -> None:
        self._writer.write(read.to_record(self._quality_format))

    def close(self) -> None:
        self._writer.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


class OutputFiles:
    """
    Open the output files of a run. Every file opened through this class is
    closed when the context is left, also if an exception occurred.
    """

    def __init__(self, config, opener: Optional[FileOpener] = None):
        self._config = config
        self._opener = opener if opener is not None else FileOpener(
            compression_level=config.compression_level
        )
        self._stack = ExitStack()

    def open_record_writer(self, option: str, default_suffix: str) -> FastqWriter:
        path = self._config.output_path(option, default_suffix)
        writer = FastqWriter(path, self._config.quality_output_fmt, self._opener)
        return self._stack.enter_context(writer)

    def close(self) -> None:
        self._stack.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
