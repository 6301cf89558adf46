from typing import List

from prototyper.spec import PropertyFacts


def extract_virtual_properties(facts: PropertyFacts) -> List[str]:
    """
    Names referenced through the instance but never declared by the class,
    in the order they are first referenced.
    """
    declared = set(facts.declared)
    requested = dict.fromkeys(facts.referenced)
    return [name for name in requested if name not in declared]
