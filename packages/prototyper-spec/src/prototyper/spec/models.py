from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class ArgumentKind(str, Enum):
    POSITIONAL_ONLY = "POSITIONAL_ONLY"
    POSITIONAL_OR_KEYWORD = "POSITIONAL_OR_KEYWORD"
    VAR_POSITIONAL = "VAR_POSITIONAL"  # *args
    KEYWORD_ONLY = "KEYWORD_ONLY"
    VAR_KEYWORD = "VAR_KEYWORD"  # **kwargs


@dataclass
class TypeRef:
    fqn: str
    alias: Optional[str] = None

    def __post_init__(self):
        if not self.fqn or not all(self.fqn.split(".")):
            raise ValueError(f"Invalid fully-qualified type name: '{self.fqn}'")

    @property
    def short_name(self) -> str:
        return self.fqn.rsplit(".", 1)[-1]

    @property
    def module(self) -> str:
        return self.fqn.rpartition(".")[0]

    @property
    def alias_or_short_name(self) -> str:
        return self.alias or self.short_name


@dataclass
class ImportUsage:
    fqn: str
    alias: Optional[str] = None

    @property
    def short_name(self) -> str:
        return self.fqn.rsplit(".", 1)[-1]

    @property
    def bound_name(self) -> str:
        """The name this import binds in the module namespace."""
        return self.alias or self.short_name


@dataclass
class ConstructorParam:
    name: str
    kind: ArgumentKind = ArgumentKind.POSITIONAL_OR_KEYWORD
    annotation: Optional[str] = None
    default: Optional[str] = None  # The source text of the default value
    nullable: bool = False

    @property
    def has_default(self) -> bool:
        return self.default is not None


@dataclass
class Dependency:
    name: str
    type: TypeRef
    var: str = ""
    property: str = ""

    def __post_init__(self):
        # Until resolution runs, the requested name is both the variable and
        # the backing property.
        if not self.var:
            self.var = self.name
        if not self.property:
            self.property = self.name

    @classmethod
    def create(cls, name: str, fqn: str) -> "Dependency":
        return cls(name=name, type=TypeRef(fqn))


@dataclass
class ClassModel:
    class_name: str
    namespace: str = ""
    has_constructor: bool = False
    constructor_params: Dict[str, ConstructorParam] = field(default_factory=dict)
    constructor_vars: List[str] = field(default_factory=list)
    imports: List[ImportUsage] = field(default_factory=list)
    instantiations: List[str] = field(default_factory=list)
    module_classes: List[str] = field(default_factory=list)
    dependencies: Dict[str, Dependency] = field(default_factory=dict)

    @classmethod
    def create(cls, class_name: str, namespace: str = "") -> "ClassModel":
        return cls(class_name=class_name, namespace=namespace)

    @property
    def fqn(self) -> str:
        if self.namespace:
            return f"{self.namespace}.{self.class_name}"
        return self.class_name

    def add_import(self, fqn: str, alias: Optional[str] = None) -> None:
        self.imports.append(ImportUsage(fqn, alias))

    def add_instantiation(self, fqn: str) -> None:
        if fqn not in self.instantiations:
            self.instantiations.append(fqn)

    def add_param(self, param: ConstructorParam) -> None:
        self.constructor_params[param.name] = param

    def find_import(self, fqn: str) -> Optional[ImportUsage]:
        for usage in self.imports:
            if usage.fqn == fqn:
                return usage
        return None

    def is_local_type(self, type_ref: TypeRef) -> bool:
        """True if the type is declared in the same module as this class."""
        return type_ref.module == self.namespace
