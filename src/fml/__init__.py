"""
FML: Feature Manifest Language front-end.

    manifest.yaml --> front-end document --> FeatureManifest IR
"""

from fml.errors import (
    FMLError,
    ManifestIOError,
    DeserializationError,
    TypeParsingError,
    MalformedTypeExpression,
    UnsupportedMapKey,
    UnknownUserType,
)
from fml.frontend import Parser, SymbolTable, lower_manifest, type_ref_from_string
from fml.ir import FeatureManifest

__version__ = "0.1.0"
