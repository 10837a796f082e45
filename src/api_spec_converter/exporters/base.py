"""Common exporter protocol: load a Project, build a definition, serialize it."""

from api_spec_converter.entities.project import Project
from api_spec_converter.errors import ConverterError


class Exporter:
    """Base exporter. Subclasses implement ``_export`` and ``_get_data``."""

    def __init__(self):
        self.project: Project | None = None
        self.data: dict | None = None

    def load_project(self, project: Project) -> None:
        self.project = project

    def export(self, fmt: str = "yaml") -> str:
        """Build the definition for the loaded project and serialize it."""
        if self.project is None:
            raise ConverterError("No project loaded")
        self._export()
        return self._get_data(fmt)

    def _export(self) -> None:
        raise NotImplementedError("_export method not implemented")

    def _get_data(self, fmt: str) -> str:
        raise NotImplementedError("_get_data method not implemented")
