#!/usr/bin/env python3
"""
Template Cache

Caller-owned store of fetched schema snapshots, keyed by schema URI. Fetching
is the caller's job: this only remembers what has been fetched, reports what
is missing, and builds hierarchies on demand.
"""

import logging
from collections import OrderedDict
from typing import Iterable, Optional

from ..core.config import SchemaConfig, schema_config
from ..models.models import SchemaSummary
from .domain.schema.hierarchy import SchemaHierarchy

logger = logging.getLogger(__name__)


class TemplateCache:
    """
    Cache of immutable schema snapshots.

    Each session owns its own instance, so independent sessions never see one
    another's templates. Replacing a snapshot discards its hierarchy.
    When max_entries is positive the least recently used entries are evicted.
    """

    def __init__(self, max_entries: Optional[int] = None, config: Optional[SchemaConfig] = None):
        self.config = config or schema_config
        self.max_entries = self.config.TEMPLATE_CACHE_MAX_ENTRIES if max_entries is None else max_entries
        self._schemas: OrderedDict[str, SchemaSummary] = OrderedDict()
        self._hierarchies: dict[str, SchemaHierarchy] = {}

    def __contains__(self, schema_uri: str) -> bool:
        return schema_uri in self._schemas

    def __len__(self) -> int:
        return len(self._schemas)

    def get(self, schema_uri: str) -> Optional[SchemaSummary]:
        """Return the cached schema, or None if it has not been fetched."""
        schema = self._schemas.get(schema_uri)
        if schema is not None:
            self._schemas.move_to_end(schema_uri)
        return schema

    def put(self, schema: SchemaSummary) -> None:
        uri = schema.schema_uri
        if self._schemas.get(uri) is not schema:
            self._hierarchies.pop(uri, None)
        self._schemas[uri] = schema
        self._schemas.move_to_end(uri)

        while self.max_entries and len(self._schemas) > self.max_entries:
            evicted, _ = self._schemas.popitem(last=False)
            self._hierarchies.pop(evicted, None)
            logger.debug("Evicted template from cache", extra={"schema_uri": evicted})

    cache_template = put

    def missing(self, schema_uris: Iterable[str]) -> list[str]:
        """Which of these schemas still need fetching (order preserved, no repeats)."""
        result = []
        for uri in schema_uris:
            if uri not in self._schemas and uri not in result:
                result.append(uri)
        return result

    def hierarchy(self, schema_uri: str) -> Optional[SchemaHierarchy]:
        """Hierarchy for a cached schema, built on first request."""
        schema = self.get(schema_uri)
        if schema is None:
            return None
        hierarchy = self._hierarchies.get(schema_uri)
        if hierarchy is None:
            hierarchy = SchemaHierarchy(schema, self.config)
            self._hierarchies[schema_uri] = hierarchy
        return hierarchy

    def evict(self, schema_uri: str) -> bool:
        self._hierarchies.pop(schema_uri, None)
        return self._schemas.pop(schema_uri, None) is not None

    def clear(self) -> None:
        self._schemas.clear()
        self._hierarchies.clear()
