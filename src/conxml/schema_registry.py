"""Schema registry — container schema id to the message schema ids it requires."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from conxml.errors import UnknownSchemaError
from conxml.messages import (
    PAIN_001_001_03,
    PAIN_001_001_09,
    PAIN_008_001_02,
    PAIN_008_001_08,
    MessageVariant,
)

CONTAINER_NNN_001_02 = "container.nnn.001.02"
CONTAINER_NNN_001_GBIC4 = "container.nnn.001.GBIC4"
CONTAINER_NNN_001_04 = "container.nnn.001.04"

CONTAINER_NAMESPACE_PREFIX = "urn:conxml:xsd:"


class ContainerSchemaRegistry:
    """Immutable registry: container schema id -> {variant -> message schema id}.

    Insertion order of the mapping is the order of known schemas; the first
    entry is the default. Every container schema must map every message
    variant.
    """

    def __init__(
        self, mapping: Mapping[str, Mapping[MessageVariant, str]]
    ) -> None:
        """Build registry from mapping.

        Args:
            mapping: Ordered container schema id to per-variant message schema id.

        Raises:
            ValueError: If mapping is empty or an entry misses a variant.
        """
        if not mapping:
            raise ValueError("Schema registry needs at least one container schema")
        frozen: dict[str, Mapping[MessageVariant, str]] = {}
        for schema_id, message_schemas in mapping.items():
            missing = [v for v in MessageVariant if v not in message_schemas]
            if missing:
                names = ", ".join(v.value for v in missing)
                raise ValueError(
                    f"Container schema {schema_id!r} does not map variant(s): {names}"
                )
            frozen[schema_id] = MappingProxyType(
                {v: message_schemas[v] for v in MessageVariant}
            )
        self._mapping = MappingProxyType(frozen)
        self._known = tuple(frozen)

    @property
    def known_schemas(self) -> tuple[str, ...]:
        """Known container schema ids in registry order."""
        return self._known

    @property
    def default_schema(self) -> str:
        """Schema id used when none is requested."""
        return self._known[0]

    def is_known(self, schema_id: str) -> bool:
        """Return whether schema_id is a known container schema."""
        return schema_id in self._mapping

    def require_known(self, schema_id: str) -> None:
        """Raise UnknownSchemaError unless schema_id is known."""
        if schema_id not in self._mapping:
            raise UnknownSchemaError(schema_id)

    def message_schemas(self, schema_id: str) -> Mapping[MessageVariant, str]:
        """Return the per-variant message schema ids for a container schema."""
        self.require_known(schema_id)
        return self._mapping[schema_id]

    def message_schema_for(self, schema_id: str, variant: MessageVariant) -> str:
        """Return the message schema id variant must satisfy under schema_id."""
        return self.message_schemas(schema_id)[variant]

    def with_default(self, schema_id: str) -> ContainerSchemaRegistry:
        """Return a copy of this registry with schema_id moved to the front.

        Raises:
            UnknownSchemaError: If schema_id is not known.
        """
        self.require_known(schema_id)
        reordered = {schema_id: self._mapping[schema_id]}
        reordered.update(
            (known, self._mapping[known]) for known in self._known if known != schema_id
        )
        return ContainerSchemaRegistry(reordered)


def container_namespace(schema_id: str) -> str:
    """Return the envelope namespace URI for a container schema id."""
    return f"{CONTAINER_NAMESPACE_PREFIX}{schema_id}"


def schema_id_from_namespace(namespace: str | None) -> str:
    """Return the container schema id embedded in an envelope namespace URI.

    Raises:
        ValueError: If namespace is not a container namespace.
    """
    if not namespace or not namespace.startswith(CONTAINER_NAMESPACE_PREFIX):
        raise ValueError(f"Not a container namespace: {namespace!r}")
    return namespace.removeprefix(CONTAINER_NAMESPACE_PREFIX)


DEFAULT_REGISTRY = ContainerSchemaRegistry(
    {
        CONTAINER_NNN_001_02: {
            MessageVariant.CREDIT_TRANSFER: PAIN_001_001_03,
            MessageVariant.DIRECT_DEBIT: PAIN_008_001_02,
        },
        CONTAINER_NNN_001_GBIC4: {
            MessageVariant.CREDIT_TRANSFER: PAIN_001_001_09,
            MessageVariant.DIRECT_DEBIT: PAIN_008_001_08,
        },
        CONTAINER_NNN_001_04: {
            MessageVariant.CREDIT_TRANSFER: PAIN_001_001_09,
            MessageVariant.DIRECT_DEBIT: PAIN_008_001_08,
        },
    }
)
