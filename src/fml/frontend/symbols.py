"""
Symbol table of user-declared types.

Built once per manifest from the lowered enums and objects, then
passed explicitly to whatever needs to resolve a bare type name.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from fml.ir.schema import EnumDef, EnumType, ObjectDef, ObjectType, TypeRef


@dataclass(frozen=True)
class SymbolTable:
    symbols: Mapping[str, TypeRef] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_defs(
        cls,
        enum_defs: Iterable[EnumDef],
        obj_defs: Iterable[ObjectDef],
    ) -> "SymbolTable":
        return cls.from_names(
            [e.name for e in enum_defs],
            [o.name for o in obj_defs],
        )

    @classmethod
    def from_names(
        cls,
        enum_names: Iterable[str],
        object_names: Iterable[str],
    ) -> "SymbolTable":
        # Objects are registered after enums, so an object wins a name clash.
        symbols = {name: EnumType(name) for name in enum_names}
        symbols.update({name: ObjectType(name) for name in object_names})
        return cls(MappingProxyType(symbols))

    def lookup(self, name: str) -> Optional[TypeRef]:
        return self.symbols.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self.symbols

    def __len__(self) -> int:
        return len(self.symbols)
