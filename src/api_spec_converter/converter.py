"""Conversion facade: one importer feeding one exporter."""

import logging
from pathlib import Path

from api_spec_converter.formats import FORMATS, get_exporter, get_importer
from api_spec_converter.utils import url as url_helper

logger = logging.getLogger(__name__)


def _is_file(source) -> bool:
    if isinstance(source, Path):
        return True
    if "\n" in source:
        return False
    try:
        return Path(source).is_file()
    except (OSError, ValueError):
        return False


class Converter:
    """Converts a document from ``from_format`` to ``to_format``."""

    def __init__(self, from_format: str, to_format: str):
        self.from_format = from_format
        self.to_format = to_format
        self.importer = get_importer(from_format)
        self.exporter = get_exporter(to_format)

    def load_file(self, source: str | Path) -> None:
        self.importer.load_file(source)

    def load_data(self, text: str) -> None:
        self.importer.load_data(text)

    def load(self, source: str | Path) -> None:
        """Load a URL, an existing file, or otherwise raw document text."""
        if isinstance(source, str) and url_helper.is_url(source):
            self.load_file(source)
        elif _is_file(source):
            self.load_file(source)
        else:
            self.load_data(source)

    def convert(self, source: str | Path | None = None, fmt: str | None = None) -> str:
        """Run the import and export passes and return the serialized document.

        Without ``source`` the document loaded earlier through ``load_file``
        or ``load_data`` is converted.
        """
        if source is not None:
            self.load(source)
        project = self.importer.import_project()
        logger.debug("Converting %s -> %s", self.from_format, self.to_format)
        self.exporter.load_project(project)
        return self.exporter.export(fmt or FORMATS[self.to_format].formats[0])
