"""
SSOConfig - SSO session management for the shared credentials config file.

File access for the profile config file.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence, Union

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV_VAR = "AWS_CONFIG_FILE"


class ProfileFileError(Exception):
    """Raised when the profile config file cannot be read or written."""

    def __init__(self, message: str, path: Path, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.path = path
        self.cause = cause


def default_config_path() -> Path:
    """
    Get the location of the shared config file.

    Returns:
        ``$AWS_CONFIG_FILE`` when set, otherwise ``~/.aws/config``
    """
    override = os.environ.get(CONFIG_FILE_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".aws" / "config"


class ProfileFile:
    """
    Reads and rewrites the profile config file as a whole.

    The file is re-read on every call; nothing is cached between reads.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None, encoding: str = "utf-8"):
        self.path = Path(path).expanduser() if path else default_config_path()
        self.encoding = encoding

    def exists(self) -> bool:
        return self.path.is_file()

    def read_lines(self) -> List[str]:
        """
        Read the file as a list of lines without line terminators.

        A missing file reads as empty.

        Raises:
            ProfileFileError: If the file exists but cannot be read
        """
        try:
            with open(self.path, "r", encoding=self.encoding) as f:
                content = f.read()
        except FileNotFoundError:
            logger.debug(f"Config file {self.path} does not exist, treating as empty")
            return []
        except (OSError, UnicodeDecodeError) as e:
            raise ProfileFileError(f"Failed to read {self.path}: {e}", self.path, e) from e

        if not content:
            return []
        # Text mode already folded \r\n and \r into \n; no other character ends a line.
        lines = content.split("\n")
        if content.endswith("\n"):
            lines.pop()
        return lines

    def write_text(self, content: str) -> None:
        """
        Replace the file content atomically.

        The content goes to a temporary file in the same directory which is
        then moved over the original, so readers never see a partial write.

        Raises:
            ProfileFileError: If the file cannot be written
        """
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding=self.encoding,
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(content)
                tmp.flush()
                os.fsync(tmp.fileno())
            if self.path.exists():
                os.chmod(tmp_name, self.path.stat().st_mode & 0o777)
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as e:
            raise ProfileFileError(f"Failed to write {self.path}: {e}", self.path, e) from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

        logger.debug(f"Wrote {len(content)} characters to {self.path}")

    def write_lines(self, lines: Sequence[str]) -> None:
        """Join ``lines`` with newlines and write them back."""
        self.write_text("\n".join(lines))
