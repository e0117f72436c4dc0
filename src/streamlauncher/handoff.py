"""Single-slot handoff of the broadcast identifier between invocations.

`stream schedule` writes the identifier; later `stream start` and
`stream end` runs read it when no identifier is passed explicitly. A new
write replaces the previous identifier.
"""

import logging
import os
from pathlib import Path

from streamlauncher.utils.errors import HandoffReadError

logger = logging.getLogger(__name__)


class HandoffStore:
    """One text file holding the last scheduled broadcast identifier."""

    def __init__(self, path: Path):
        self.path = path

    def write(self, value: str) -> None:
        """Replace the stored identifier.

        Raises:
            OSError: If the file cannot be written
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self.path.with_name(self.path.name + ".tmp")
        temp_path.write_text(value.strip() + "\n", encoding="utf-8")
        os.replace(temp_path, self.path)

    def read(self) -> str | None:
        """Return the stored identifier, or None if there is none.

        Raises:
            HandoffReadError: If the file exists but cannot be read
        """
        if not self.path.exists():
            return None
        try:
            value = self.path.read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as e:
            raise HandoffReadError(f"Could not read {self.path}: {e}") from e
        return value or None

    def resolve(self, explicit: str | None = None) -> str:
        """Return ``explicit`` if given, otherwise the stored identifier.

        Raises:
            HandoffReadError: If neither is available
        """
        if explicit and explicit.strip():
            return explicit.strip()
        value = self.read()
        if value is None:
            raise HandoffReadError(
                f"No broadcast ID provided and none stored in {self.path}"
            )
        return value
