"""
FML front-end

Turns an authored YAML manifest into the Feature Manifest IR.

- Type expressions are parsed and resolved into TypeRef trees
- Feature variables may name declared enums/objects directly
- Every failure is raised as an FMLError
"""

from .typeref import (
    parse_type_expression,
    resolve_type,
    tokenize,
    type_ref_from_string,
)
from .symbols import SymbolTable
from .lowering import (
    Parser,
    load_document,
    lower_manifest,
    parse_document,
    parse_document_text,
    resolve_type_name,
)
