import json

import pytest

from api_spec_converter.entities.endpoint import Endpoint, SecuredBy
from api_spec_converter.entities.environment import (
    ApiKeyScheme,
    ApiKeyTransport,
    Environment,
    OAuth2Scheme,
    SecuritySchemes,
)
from api_spec_converter.entities.project import Project, Schema
from api_spec_converter.errors import UnsupportedFormatError
from api_spec_converter.exporters.raml import RamlExporter
from api_spec_converter.exporters.raml_variants import (
    VARIANTS,
    Raml08,
    Raml10,
    RamlVariant,
    camel_case,
    get_variant,
)


class TestVariantLookup:
    @pytest.mark.parametrize("tag,cls", [("0.8", Raml08), ("1.0", Raml10)])
    def test_by_tag(self, tag, cls):
        variant = get_variant(tag)
        assert isinstance(variant, cls)
        assert variant.version() == tag

    def test_unknown_tag(self):
        with pytest.raises(UnsupportedFormatError):
            get_variant("0.9")

    def test_registry(self):
        assert set(VARIANTS) == {"0.8", "1.0"}


class TestMissingHooks:
    @pytest.mark.parametrize("hook,args", [
        ("version", ()),
        ("description", ({}, Project())),
        ("map_authorization_grants", ("implicit",)),
        ("map_body", ({},)),
        ("map_request_body_form", ({},)),
        ("map_schema", ([],)),
        ("get_api_key_type", ()),
        ("map_security_schemes", ({},)),
        ("set_method_display_name", ({}, "x")),
        ("initialize_traits", ()),
    ])
    def test_unsupplied_hook_raises(self, hook, args):
        with pytest.raises(NotImplementedError):
            getattr(RamlVariant(), hook)(*args)

    def test_partial_variant_fails_on_first_use(self):
        class Partial(RamlVariant):
            def version(self):
                return "9.9"

        with pytest.raises(NotImplementedError):
            Partial().map_media_type([], [])


class TestGrants:
    @pytest.mark.parametrize("flow,raml10,raml08", [
        ("implicit", "implicit", "token"),
        ("password", "password", "owner"),
        ("application", "client_credentials", "credentials"),
        ("accessCode", "authorization_code", "code"),
    ])
    def test_grant_mapping(self, flow, raml10, raml08):
        assert Raml10().map_authorization_grants(flow) == [raml10]
        assert Raml08().map_authorization_grants(flow) == [raml08]

    def test_unknown_flow(self):
        assert Raml10().map_authorization_grants("device") == []


class TestMediaType:
    def test_raml10_single_and_many(self):
        assert Raml10().map_media_type(["application/json"], ["application/json"]) == "application/json"
        assert Raml10().map_media_type(["application/json"], ["application/xml"]) == [
            "application/json",
            "application/xml",
        ]

    def test_raml08_first_only(self):
        assert Raml08().map_media_type(["application/json"], ["application/xml"]) == "application/json"
        assert Raml08().map_media_type([], []) == ""


class TestCamelCase:
    @pytest.mark.parametrize("name,expected", [
        ("paged list", "pagedList"),
        ("Secured-Resource", "securedResource"),
        ("x", "x"),
        ("", ""),
    ])
    def test_camel_case(self, name, expected):
        assert camel_case(name) == expected


class TestRaml08Export:
    def _project(self) -> Project:
        create = Endpoint(name="Create pet", consumes=["application/json"])
        create.path = "/pets"
        create.method = "POST"
        create.add_body({"body": {"$ref": "#/definitions/Pet"}})
        create.secured_by = SecuredBy(api_key=True, oauth2=[])

        upload = Endpoint(name="Upload", consumes=["multipart/form-data"], tags=["pets"], summary="Up")
        upload.path = "/pets/photo"
        upload.method = "put"
        upload.add_body({"body": {
            "type": "object",
            "required": ["file"],
            "properties": {"file": {"type": "binary"}, "caption": {"type": "string"}},
        }})

        env = Environment(security_schemes=SecuritySchemes(
            oauth2=OAuth2Scheme(flow="implicit", authorization_url="https://auth"),
            api_key=ApiKeyScheme(headers=[ApiKeyTransport(name="X-Key")]),
        ))
        return Project(
            name="Pets",
            description="Pet API",
            environment=env,
            endpoints=[create, upload],
            schemas=[Schema(name="Pet", definition=json.dumps({"type": "object"}))],
        )

    def _export(self) -> dict:
        exporter = RamlExporter("0.8")
        exporter.load_project(self._project())
        exporter.export()
        return exporter.data

    def test_header_line(self):
        exporter = RamlExporter("0.8")
        exporter.load_project(self._project())
        assert exporter.export().startswith("#%RAML 0.8\n")

    def test_description_becomes_documentation(self):
        assert self._export()["documentation"] == [{"title": "Description", "content": "Pet API"}]

    def test_schemas_are_json_text(self):
        assert self._export()["schemas"] == [{"Pet": '{\n    "type": "object"\n}'}]

    def test_body_references_named_schema(self):
        post = self._export()["/pets"]["post"]
        assert post["body"] == {"application/json": {"schema": "Pet"}}
        assert post["description"] == "Create pet"
        assert "displayName" not in post

    def test_form_parameters(self):
        put = self._export()["/pets"]["/photo"]["put"]
        assert put["body"]["multipart/form-data"] == {
            "formParameters": {
                "file": {"type": "file", "required": True},
                "caption": {"type": "string"},
            },
        }

    def test_security_schemes_are_a_list(self):
        data = self._export()
        assert data["securitySchemes"] == [
            {"oauth2": {"type": "OAuth 2.0", "settings": {
                "authorizationUri": "https://auth",
                "accessTokenUri": "",
                "authorizationGrants": ["token"],
            }}},
            {"apiKey": {"type": "x-api-key", "describedBy": {"headers": {"X-Key": {"type": "string"}}}}},
        ]
        assert data["/pets"]["post"]["securedBy"] == ["oauth2", "apiKey"]

    def test_no_annotations(self):
        data = self._export()
        put = data["/pets"]["/photo"]["put"]
        assert "annotationTypes" not in data
        assert not [k for k in put if k.startswith("(")]
