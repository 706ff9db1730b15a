"""
Feature Manifest IR

The resolved, strongly-typed form of a manifest.

- Every type expression is resolved into a TypeRef tree
- It is immutable once built
- It is handed as a whole to downstream code generators
"""

from .schema import (
    TypeKind,
    TypeRef,
    StringType,
    IntType,
    BooleanType,
    NamedType,
    BundleTextType,
    BundleImageType,
    EnumType,
    ObjectType,
    ListType,
    OptionType,
    StringMapType,
    EnumMapType,
    VariantDef,
    EnumDef,
    PropDef,
    ObjectDef,
    FeatureDef,
    FeatureManifest,
)
