"""
Manifest --> IR lowering pass
=============================

Purpose:
- Read the authored YAML manifest into its front-end shape
- Resolve every type expression into a TypeRef
- Let feature variables name declared enums/objects directly
- Assemble the immutable FeatureManifest

Order of the pass:
    enums -> objects -> symbol table -> features -> FeatureManifest

This module:
- DOES NOT validate defaults against their declared types
- DOES NOT generate code
- DOES NOT mutate the front-end document
"""

from __future__ import annotations

import copy
import logging
import re
from pathlib import Path
from typing import Any, List, Mapping, Optional, Tuple, Union

import yaml
from pydantic import ValidationError

from fml.config import settings
from fml.errors import (
    DeserializationError,
    FMLError,
    ManifestIOError,
    TypeParsingError,
    UnknownUserType,
)
from fml.frontend.schema import (
    EnumBody,
    FeatureBody,
    ManifestFrontEnd,
    ObjectBody,
)
from fml.frontend.symbols import SymbolTable
from fml.frontend.typeref import type_ref_from_string
from fml.ir.schema import (
    EnumDef,
    FeatureDef,
    FeatureManifest,
    ObjectDef,
    PropDef,
    TypeRef,
    VariantDef,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Document loading
# ---------------------------------------------------------------------------

class ManifestLoader(yaml.SafeLoader):
    """
    SafeLoader that reads booleans the YAML 1.2 way.

    Only true/false resolve to bool, so variant names and defaults such as
    on, off, yes and no stay strings.
    """


ManifestLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:bool"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
ManifestLoader.add_implicit_resolver(
    "tag:yaml.org,2002:bool",
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


def load_document(path: Union[str, Path]) -> ManifestFrontEnd:
    """
    Read a manifest file and validate its shape.

    Raises:
        ManifestIOError if the file cannot be read
        DeserializationError if it is not a well-formed manifest
    """

    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        raise ManifestIOError(f"Failed to read manifest '{path}': {e}") from e

    logger.debug("Read manifest %s (%d bytes)", path, len(text))
    return parse_document_text(text)


def parse_document_text(text: str) -> ManifestFrontEnd:
    try:
        data = yaml.load(text, Loader=ManifestLoader)
    except yaml.YAMLError as e:
        raise DeserializationError(f"Manifest is not valid YAML: {e}") from e

    return parse_document(data)


def parse_document(data: Any) -> ManifestFrontEnd:
    """
    Validate an already deserialized mapping into the front-end shape.
    """

    if not isinstance(data, Mapping):
        raise DeserializationError(
            f"Manifest must be a mapping at the top level, got {type(data).__name__}"
        )

    try:
        return ManifestFrontEnd.model_validate(data)
    except ValidationError as e:
        raise DeserializationError(f"Manifest does not match the expected shape: {e}") from e


# ---------------------------------------------------------------------------
# Main lowering entry
# ---------------------------------------------------------------------------

def lower_manifest(
    document: ManifestFrontEnd,
    *,
    object_field_fallback: Optional[bool] = None,
) -> FeatureManifest:
    """
    Lower a front-end manifest to the IR.

    object_field_fallback lets object fields name declared enums/objects
    the way feature variables can. It defaults to the configured setting.

    Raises:
        TypeParsingError (or a subclass) for a bad object field type
        UnknownUserType for a feature variable type that cannot be resolved
    """

    if object_field_fallback is None:
        object_field_fallback = settings.object_field_fallback

    enum_defs = lower_enums(document.types.enums)

    if object_field_fallback:
        # Object names are known before any object is lowered.
        object_symbols = SymbolTable.from_names(
            [e.name for e in enum_defs],
            document.types.objects.keys(),
        )
        obj_defs = lower_objects(document.types.objects, object_symbols)
    else:
        obj_defs = lower_objects(document.types.objects)

    symbols = SymbolTable.from_defs(enum_defs, obj_defs)
    logger.debug("Symbol table holds %d user types", len(symbols))

    feature_defs = lower_features(document.features, symbols)

    return FeatureManifest(
        enum_defs=enum_defs,
        obj_defs=obj_defs,
        feature_defs=feature_defs,
        hints={},
    )


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

def lower_enums(enums: Mapping[str, EnumBody]) -> Tuple[EnumDef, ...]:
    enum_defs = tuple(
        EnumDef(
            name=name,
            doc=body.description,
            variants=tuple(
                VariantDef(name=variant_name, doc=variant.description)
                for variant_name, variant in body.variants.items()
            ),
        )
        for name, body in enums.items()
    )
    logger.debug("Lowered %d enums", len(enum_defs))
    return enum_defs


def lower_objects(
    objects: Mapping[str, ObjectBody],
    symbols: Optional[SymbolTable] = None,
) -> Tuple[ObjectDef, ...]:
    """
    Lower object declarations.

    Without a symbol table, field types must be built-in type
    expressions (String, Option<...>, Object<Name>, ...).
    """

    obj_defs: List[ObjectDef] = []

    for obj_name, body in objects.items():
        props: List[PropDef] = []

        for field_name, field_body in body.object_fields.items():
            try:
                if symbols is None:
                    typ = type_ref_from_string(field_body.variable_type)
                else:
                    typ = resolve_type_name(field_body.variable_type, symbols)
            except FMLError as e:
                raise type(e)(
                    f"object '{obj_name}', field '{field_name}': {e.message}"
                ) from e

            props.append(
                PropDef(
                    name=field_name,
                    doc=field_body.description,
                    typ=typ,
                    default=copy.deepcopy(field_body.default),
                )
            )

        obj_defs.append(ObjectDef(name=obj_name, doc=body.description, props=tuple(props)))

    logger.debug("Lowered %d objects", len(obj_defs))
    return tuple(obj_defs)


def lower_features(
    features: Mapping[str, FeatureBody],
    symbols: SymbolTable,
) -> Tuple[FeatureDef, ...]:
    feature_defs: List[FeatureDef] = []

    for feature_name, body in features.items():
        props: List[PropDef] = []

        for var_name, var_body in body.variables.items():
            try:
                typ = resolve_type_name(var_body.variable_type, symbols)
            except FMLError as e:
                raise type(e)(
                    f"feature '{feature_name}', variable '{var_name}': {e.message}"
                ) from e

            props.append(
                PropDef(
                    name=var_name,
                    doc=var_body.description,
                    typ=typ,
                    default=copy.deepcopy(var_body.default),
                )
            )

        feature_defs.append(
            FeatureDef(
                name=feature_name,
                doc=body.description,
                props=tuple(props),
                default=copy.deepcopy(body.default),
            )
        )

    logger.debug("Lowered %d features", len(feature_defs))
    return tuple(feature_defs)


# ---------------------------------------------------------------------------
# Type resolution with user types
# ---------------------------------------------------------------------------

def resolve_type_name(type_string: str, symbols: SymbolTable) -> TypeRef:
    """
    Resolve a type string, falling back to declared enum/object names.

    Built-in type expressions are tried first. If that fails for any
    reason, the raw string is looked up in the symbol table.

    Raises:
        UnknownUserType if neither succeeds.
    """

    try:
        return type_ref_from_string(type_string)
    except TypeParsingError as e:
        type_ref = symbols.lookup(type_string)
        if type_ref is None:
            raise UnknownUserType(
                f"{type_string} is not a valid FML type or user defined type ({e.message})"
            ) from e

        logger.debug("Resolved '%s' through the symbol table as %s", type_string, type_ref)
        return type_ref


# ---------------------------------------------------------------------------
# Parser facade
# ---------------------------------------------------------------------------

class Parser:
    """
    Holds one lowered manifest.

    The front-end document is lowered as soon as the parser is built;
    get_intermediate_representation() hands out the result.
    """

    def __init__(
        self,
        document: ManifestFrontEnd,
        *,
        object_field_fallback: Optional[bool] = None,
    ):
        self._ir = lower_manifest(document, object_field_fallback=object_field_fallback)
        self.channels: Tuple[str, ...] = tuple(document.channels)

    @classmethod
    def from_path(cls, path: Union[str, Path], **kwargs) -> "Parser":
        return cls(load_document(path), **kwargs)

    @classmethod
    def from_str(cls, text: str, **kwargs) -> "Parser":
        return cls(parse_document_text(text), **kwargs)

    @property
    def enums(self) -> Tuple[EnumDef, ...]:
        return self._ir.enum_defs

    @property
    def objects(self) -> Tuple[ObjectDef, ...]:
        return self._ir.obj_defs

    @property
    def features(self) -> Tuple[FeatureDef, ...]:
        return self._ir.feature_defs

    def get_intermediate_representation(self) -> FeatureManifest:
        return self._ir
