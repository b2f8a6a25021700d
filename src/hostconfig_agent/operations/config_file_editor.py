"""
Config file editor for hostconfig-agent.

Reads small system text files directly and mutates them through privileged
commands: whole-file replacement by staging and ``mv``, single-line edits by
``sed -i``. The agent itself never needs write access to /etc.
"""

import logging
import os
import shutil
import tempfile
from typing import Optional

from src.i18n import _
from src.hostconfig_agent.core import async_utils
from src.hostconfig_agent.core.command_runner import PrivilegedCommandRunner


class ConfigFileEditor:
    """Reads and edits host configuration files."""

    def __init__(self, runner: PrivilegedCommandRunner):
        self.runner = runner
        self.logger = logging.getLogger(__name__)

    async def read_text(self, path: str, strip: bool = False) -> Optional[str]:
        """
        Read a text file.

        Returns:
            The content (trimmed when ``strip`` is set), or None if the file
            is missing or unreadable
        """
        try:
            content = await async_utils.read_file_async(path)
        except FileNotFoundError:
            self.logger.debug("File %s does not exist", path)
            return None
        except (OSError, UnicodeDecodeError) as error:
            self.logger.warning(_("Failed to read %s: %s"), path, error)
            return None

        return content.strip() if strip else content

    async def write_text_privileged(self, path: str, content: str) -> bool:
        """
        Replace ``path`` with ``content``.

        The content is written to a private staging directory first and then
        moved into place with a privileged ``mv``, so readers of ``path`` never
        observe a partially written file.
        """
        staging_dir = tempfile.mkdtemp(prefix="hostconfig-")
        staging_path = os.path.join(staging_dir, os.path.basename(path))
        try:
            try:
                await async_utils.write_file_async(staging_path, content)
            except OSError as error:
                self.logger.error(_("Failed to stage %s: %s"), path, error)
                return False

            result = await self.runner.run("mv", [staging_path, path])
            if not result:
                self.logger.error(_("Failed to move staged file into %s"), path)
            return result.succeeded
        finally:
            shutil.rmtree(staging_dir, ignore_errors=True)

    async def substitute_line_privileged(  # pylint: disable=too-many-arguments
        self,
        path: str,
        pattern: str,
        replacement: str,
        extended: bool = False,
        global_replace: bool = False,
    ) -> bool:
        """
        Apply ``s/pattern/replacement/`` to ``path`` in place with sed.

        ``pattern`` and ``replacement`` are inserted verbatim; callers escape
        regex metacharacters and ``/`` themselves.
        """
        expression = f"s/{pattern}/{replacement}/{'g' if global_replace else ''}"
        args = ["-i"]
        if extended:
            args.append("-E")
        args.extend(["-e", expression, path])

        result = await self.runner.run("sed", args)
        return result.succeeded
