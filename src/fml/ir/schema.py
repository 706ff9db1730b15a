"""
Feature Manifest IR (Intermediate Representation)
=================================================

This IR is the fully resolved form of a feature manifest.

Properties:
- Every type expression has been resolved into a TypeRef tree
- Built once per manifest, never mutated afterwards
- Backend-agnostic (no code generation concerns)

Code generators consume this and nothing else.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple


# ---------------------------------------------------------------------------
# Type kinds
# ---------------------------------------------------------------------------

class TypeKind(str, Enum):
    STRING       = "String"
    INT          = "Int"
    BOOLEAN      = "Boolean"
    BUNDLE_TEXT  = "BundleText"
    BUNDLE_IMAGE = "BundleImage"
    ENUM         = "Enum"
    OBJECT       = "Object"
    LIST         = "List"
    OPTION       = "Option"
    STRING_MAP   = "StringMap"
    ENUM_MAP     = "EnumMap"


# ---------------------------------------------------------------------------
# TypeRef (recursive)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TypeRef:
    """
    Base of every resolved type.

    Container types own their inner TypeRef. Rendering a TypeRef with
    str() gives back a canonical type expression.
    """

    kind: TypeKind = field(init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value}

    def __str__(self) -> str:
        return self.kind.value


@dataclass(frozen=True)
class StringType(TypeRef):
    kind: TypeKind = field(default=TypeKind.STRING, init=False)


@dataclass(frozen=True)
class IntType(TypeRef):
    kind: TypeKind = field(default=TypeKind.INT, init=False)


@dataclass(frozen=True)
class BooleanType(TypeRef):
    kind: TypeKind = field(default=TypeKind.BOOLEAN, init=False)


@dataclass(frozen=True)
class NamedType(TypeRef):
    """
    A type that refers to something by name (a bundle resource,
    an enum or an object).
    """

    name: str

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "name": self.name}

    def __str__(self) -> str:
        return f"{self.kind.value}<{self.name}>"


@dataclass(frozen=True)
class BundleTextType(NamedType):
    kind: TypeKind = field(default=TypeKind.BUNDLE_TEXT, init=False)


@dataclass(frozen=True)
class BundleImageType(NamedType):
    kind: TypeKind = field(default=TypeKind.BUNDLE_IMAGE, init=False)


@dataclass(frozen=True)
class EnumType(NamedType):
    kind: TypeKind = field(default=TypeKind.ENUM, init=False)


@dataclass(frozen=True)
class ObjectType(NamedType):
    kind: TypeKind = field(default=TypeKind.OBJECT, init=False)


@dataclass(frozen=True)
class ListType(TypeRef):
    inner: TypeRef
    kind: TypeKind = field(default=TypeKind.LIST, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "inner": self.inner.to_dict()}

    def __str__(self) -> str:
        return f"List<{self.inner}>"


@dataclass(frozen=True)
class OptionType(TypeRef):
    inner: TypeRef
    kind: TypeKind = field(default=TypeKind.OPTION, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "inner": self.inner.to_dict()}

    def __str__(self) -> str:
        return f"Option<{self.inner}>"


@dataclass(frozen=True)
class StringMapType(TypeRef):
    """Map keyed by String. The key type is implied, not stored."""

    value: TypeRef
    kind: TypeKind = field(default=TypeKind.STRING_MAP, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "value": self.value.to_dict()}

    def __str__(self) -> str:
        return f"Map<String, {self.value}>"


@dataclass(frozen=True)
class EnumMapType(TypeRef):
    """Map keyed by the variants of an enum. key is always an EnumType."""

    key: EnumType
    value: TypeRef
    kind: TypeKind = field(default=TypeKind.ENUM_MAP, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "key": self.key.to_dict(),
            "value": self.value.to_dict(),
        }

    def __str__(self) -> str:
        return f"Map<{self.key}, {self.value}>"


# ---------------------------------------------------------------------------
# Definitions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class VariantDef:
    name: str
    doc: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "doc": self.doc}


@dataclass(frozen=True)
class EnumDef:
    """
    An enum declared in the manifest.

    Variants keep the order they were declared in.
    """
    name: str
    doc: str
    variants: Tuple[VariantDef, ...] = ()

    def get_variant(self, name: str) -> Optional[VariantDef]:
        return next((v for v in self.variants if v.name == name), None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "doc": self.doc,
            "variants": [v.to_dict() for v in self.variants],
        }


@dataclass(frozen=True)
class PropDef:
    """
    A field of an object, or a variable of a feature.

    default is the raw value from the manifest, carried through
    untouched. None means no default was given.
    """
    name: str
    doc: str
    typ: TypeRef
    default: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "doc": self.doc,
            "type": self.typ.to_dict(),
            "default": self.default,
        }


def _find_prop(props: Tuple[PropDef, ...], name: str) -> Optional[PropDef]:
    return next((p for p in props if p.name == name), None)


@dataclass(frozen=True)
class ObjectDef:
    name: str
    doc: str
    props: Tuple[PropDef, ...] = ()

    def get_prop(self, name: str) -> Optional[PropDef]:
        return _find_prop(self.props, name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "doc": self.doc,
            "props": [p.to_dict() for p in self.props],
        }


@dataclass(frozen=True)
class FeatureDef:
    """
    A feature and its variables.

    default is the feature-level default (supplementing the
    per-variable ones). It is None when the manifest gave none.
    """
    name: str
    doc: str
    props: Tuple[PropDef, ...] = ()
    default: Optional[Any] = None

    def get_prop(self, name: str) -> Optional[PropDef]:
        return _find_prop(self.props, name)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "name": self.name,
            "doc": self.doc,
            "props": [p.to_dict() for p in self.props],
        }
        if self.default is not None:
            data["default"] = self.default
        return data


# ---------------------------------------------------------------------------
# IR root
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FeatureManifest:
    """
    Fully lowered manifest.

    hints is filled in by later stages and is always empty here.
    It is held as a read-only mapping.
    """
    enum_defs: Tuple[EnumDef, ...] = ()
    obj_defs: Tuple[ObjectDef, ...] = ()
    feature_defs: Tuple[FeatureDef, ...] = ()
    hints: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self):
        object.__setattr__(self, "hints", MappingProxyType(dict(self.hints)))

    def get_enum(self, name: str) -> Optional[EnumDef]:
        return next((e for e in self.enum_defs if e.name == name), None)

    def get_object(self, name: str) -> Optional[ObjectDef]:
        return next((o for o in self.obj_defs if o.name == name), None)

    def get_feature(self, name: str) -> Optional[FeatureDef]:
        return next((f for f in self.feature_defs if f.name == name), None)

    def to_dict(self) -> dict:
        """
        Serialize into plain Python dicts.
        Safe for JSON, tests and logging.
        """
        return {
            "enum_defs": [e.to_dict() for e in self.enum_defs],
            "obj_defs": [o.to_dict() for o in self.obj_defs],
            "feature_defs": [f.to_dict() for f in self.feature_defs],
            "hints": dict(self.hints),
        }
