"""Supported formats and the importer/exporter behind each."""

from pydantic import BaseModel

from api_spec_converter.errors import UnsupportedFormatError
from api_spec_converter.exporters.base import Exporter
from api_spec_converter.exporters.raml import RamlExporter
from api_spec_converter.importers.base import Importer
from api_spec_converter.importers.postman import PostmanImporter


class Format(BaseModel):
    name: str
    formats: list[str]  # serializations, first is the default
    can_import: bool = False
    can_export: bool = False


FORMATS = {
    "postman": Format(name="Postman", formats=["json"], can_import=True),
    "raml08": Format(name="RAML 0.8", formats=["yaml"], can_export=True),
    "raml10": Format(name="RAML 1.0", formats=["yaml"], can_export=True),
}

IMPORTABLE = [tag for tag, fmt in FORMATS.items() if fmt.can_import]
EXPORTABLE = [tag for tag, fmt in FORMATS.items() if fmt.can_export]


def get_importer(tag: str) -> Importer:
    if tag == "postman":
        return PostmanImporter()
    raise UnsupportedFormatError(f"Cannot import from {tag}")


def get_exporter(tag: str) -> Exporter:
    if tag == "raml08":
        return RamlExporter("0.8")
    if tag == "raml10":
        return RamlExporter("1.0")
    raise UnsupportedFormatError(f"Cannot export to {tag}")
