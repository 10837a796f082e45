"""Common importer protocol: acquire text, parse it, build a Project."""

import logging
from pathlib import Path

from api_spec_converter.entities.project import Project
from api_spec_converter.errors import ParseError
from api_spec_converter.utils import json_helper
from api_spec_converter.utils import url as url_helper

logger = logging.getLogger(__name__)


def read_source(source: str | Path) -> str:
    """Read a local file or, for http(s) sources, fetch it remotely."""
    source = str(source)
    if url_helper.is_url(source):
        return url_helper.get(source)
    return Path(source).read_text(encoding="utf-8")


class Importer:
    """Base importer. Subclasses implement ``_import`` over ``self.data``."""

    def __init__(self):
        self.data = None
        self.project: Project | None = None

    def load_file(self, source: str | Path) -> None:
        """Load a local file or, for http(s) sources, fetch it remotely."""
        self.load_data(read_source(source))

    def load_data(self, text: str) -> None:
        """Parse raw text. Malformed input raises ParseError and loads nothing."""
        self.data = json_helper.parse(text)
        logger.debug("Loaded source document (%d bytes)", len(text))

    def import_project(self) -> Project:
        if self.data is None:
            raise ParseError("No source data loaded")
        self._import()
        return self.project

    def _import(self) -> None:
        raise NotImplementedError("_import method not implemented")
