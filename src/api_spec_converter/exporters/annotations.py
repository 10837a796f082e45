"""Vendor annotations emitted into RAML definitions.

Every annotation written during an export pass is recorded in an
AnnotationSet; the set is turned into the ``annotationTypes`` block once, at
the end of the pass, so declarations match usage exactly.
"""

import copy

PREFIX = "oas-"

DECLARATIONS = {
    "oas-tags": "string[]",
    "oas-deprecated": "boolean",
    "oas-summary": "string",
    "oas-allowEmptyValue": "boolean",
    "oas-exclusiveMaximum": "boolean",
    "oas-exclusiveMinimum": "boolean",
    "oas-collectionFormat": "string",
    "oas-paths": "any",
    "oas-externalDocs": {
        "properties": {
            "description?": "string",
            "url": "string",
        },
    },
    "oas-info": {
        "properties": {
            "termsOfService?": "string",
            "contact?": {
                "properties": {
                    "name?": "string",
                    "url?": "string",
                    "email?": "string",
                },
            },
            "license?": {
                "properties": {
                    "name?": "string",
                    "url?": "string",
                },
            },
        },
    },
    "oas-tags-definition": {
        "type": "array",
        "items": {
            "properties": {
                "name": "string",
                "description?": "string",
                "externalDocs?": {
                    "properties": {
                        "url": "string",
                        "description?": "string",
                    },
                },
            },
        },
    },
}


def annotation_key(kind: str) -> str:
    """``tags`` -> ``(oas-tags)``"""
    return f"({PREFIX}{kind})"


class AnnotationSet:
    """Annotation kinds used during one export pass.

    A disabled set (for formats without annotations) writes nothing.
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._kinds: list[str] = []

    def __contains__(self, kind: str) -> bool:
        return PREFIX + kind in self._kinds

    def __len__(self) -> int:
        return len(self._kinds)

    def annotate(self, target: dict, kind: str, value) -> None:
        """Write ``value`` under the annotation key of ``kind`` and record the kind."""
        if not self.enabled:
            return
        target[annotation_key(kind)] = value
        if PREFIX + kind not in self._kinds:
            self._kinds.append(PREFIX + kind)

    def add_extensions(self, target: dict, extensions: dict | None) -> None:
        """Re-emit vendor extensions as annotations typed ``any``."""
        for key, value in (extensions or {}).items():
            self.annotate(target, key, value)

    def declarations(self) -> dict:
        """The ``annotationTypes`` block for every kind recorded so far."""
        return {kind: copy.deepcopy(DECLARATIONS.get(kind, "any")) for kind in self._kinds}

    def prune(self, definition) -> None:
        """Forget kinds whose annotations no longer appear in ``definition``.

        Parameters dropped by validation and methods replaced in the resource
        tree take their annotations with them.
        """
        present = emitted_kinds(definition)
        self._kinds = [kind for kind in self._kinds if kind in present]


def emitted_kinds(node) -> set[str]:
    """Annotation kinds (``oas-...``) used as keys anywhere under ``node``."""
    kinds = set()
    if isinstance(node, list):
        for item in node:
            kinds |= emitted_kinds(item)
    elif isinstance(node, dict):
        for key, value in node.items():
            if isinstance(key, str) and key.startswith("(" + PREFIX) and key.endswith(")"):
                kinds.add(key[1:-1])
            kinds |= emitted_kinds(value)
    return kinds
