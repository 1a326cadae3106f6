"""Optional post-processing of generated TypeScript through an external formatter."""

from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod

from .errors import FormatterError
from . import constants

logger = logging.getLogger(__name__)


class Formatter(ABC):
    @abstractmethod
    def format(self, text: str) -> str: ...


class NullFormatter(Formatter):
    """Returns the text unchanged."""

    def format(self, text: str) -> str:
        return text


class PrettierFormatter(Formatter):
    """Pipes text through ``prettier`` with the fixed option set.

    Requires ``npx`` on ``PATH``; any failure to run or a non-zero exit
    raises :class:`FormatterError` carrying prettier's stderr.
    """

    def __init__(
        self,
        command: tuple[str, ...] = constants.PRETTIER_COMMAND,
        options: tuple[str, ...] = constants.PRETTIER_OPTIONS,
    ):
        self._argv = [*command, *options]

    def format(self, text: str) -> str:
        logger.debug("Running %s", " ".join(self._argv))
        try:
            result = subprocess.run(
                self._argv,
                input=text,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            raise FormatterError(f"could not run {self._argv[0]}: {exc}") from exc
        if result.returncode != 0:
            raise FormatterError(result.stderr.strip() or f"exit status {result.returncode}")
        return result.stdout
