"""
Front-end (authored) manifest shape.

These models mirror the YAML document exactly as it is written.
They carry raw type expression strings; nothing here is resolved.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional


class EnumVariantBody(BaseModel):
    description: str


class EnumBody(BaseModel):
    description: str
    variants: Dict[str, EnumVariantBody]


class ObjectFieldBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    description: str
    required: bool = False
    variable_type: str = Field(..., alias="type")
    default: Optional[Any] = None


class ObjectBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    description: str
    failable: Optional[bool] = None
    object_fields: Dict[str, ObjectFieldBody] = Field(..., alias="fields")


class Types(BaseModel):
    enums: Dict[str, EnumBody]
    objects: Dict[str, ObjectBody]


class FeatureVariableBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    description: str
    variable_type: str = Field(..., alias="type")
    default: Optional[Any] = None


class FeatureBody(BaseModel):
    description: str
    variables: Dict[str, FeatureVariableBody]
    default: Optional[Any] = None


class ManifestFrontEnd(BaseModel):
    types: Types
    features: Dict[str, FeatureBody]
    channels: List[str]
