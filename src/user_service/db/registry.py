from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, Mapping

from pydantic import BaseModel

from ..exceptions import ResourceResolutionError


@dataclass(frozen=True)
class ResourceDescriptor:
    """Static description of one resource: where it lives and what it looks like.

    - ``schema`` validates whole documents (on create, and merged documents on update).
    - ``unique`` lists fields backed by a unique index.
    - ``references`` maps a field to the resource name it points at, for populate.
    """

    name: str
    collection: str
    schema: type[BaseModel]
    unique: tuple[str, ...] = ()
    references: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "unique", tuple(self.unique))
        object.__setattr__(self, "references", MappingProxyType(dict(self.references)))


class ModelRegistry:
    """Maps resource names to descriptors. Populated at startup, read at call time."""

    def __init__(self, descriptors: tuple[ResourceDescriptor, ...] | list[ResourceDescriptor] = ()):
        self._descriptors: dict[str, ResourceDescriptor] = {}
        for descriptor in descriptors:
            self.register(descriptor)

    def register(self, descriptor: ResourceDescriptor) -> ResourceDescriptor:
        if descriptor.name in self._descriptors:
            raise ValueError(f"Resource '{descriptor.name}' is already registered")
        self._descriptors[descriptor.name] = descriptor
        return descriptor

    def resolve(self, name: str) -> ResourceDescriptor:
        try:
            return self._descriptors[name]
        except KeyError:
            raise ResourceResolutionError(
                f"Resource '{name}' is not registered",
                details={"resource": name, "registered": self.names()},
            ) from None

    def names(self) -> list[str]:
        return sorted(self._descriptors)

    def descriptors(self) -> Iterator[ResourceDescriptor]:
        return iter(self._descriptors.values())

    def __contains__(self, name: object) -> bool:
        return name in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)
