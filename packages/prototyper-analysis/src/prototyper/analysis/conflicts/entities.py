import re
from dataclasses import dataclass
from typing import Optional

_TRAILING_DIGITS = re.compile(r"\d+$")


@dataclass
class NameEntity:
    name: str
    sequence: int = 0

    def full_name(self) -> str:
        if self.sequence > 0:
            return f"{self.name}{self.sequence}"
        return self.name


@dataclass
class NamespaceEntity(NameEntity):
    fqn: str = ""
    alias: Optional[str] = None
    # The class under rewrite reserves its own name but can never be reused
    # as an import target.
    reusable: bool = True


def parse_name(value: str) -> NameEntity:
    name, sequence = _split(value)
    return NameEntity(name, sequence)


def parse_namespace(
    short_name: str,
    fqn: str,
    alias: Optional[str] = None,
    reusable: bool = True,
) -> NamespaceEntity:
    name, sequence = _split(short_name)
    return NamespaceEntity(name, sequence, fqn=fqn, alias=alias, reusable=reusable)


def _split(value: str):
    match = _TRAILING_DIGITS.search(value)
    if match:
        sequence = int(match.group())
        # "var0" or "var00" are plain names, not postfixed ones.
        if sequence > 0:
            return value[: -len(str(sequence))], sequence
    return value, 0
