#!/usr/bin/env python3
"""
Configuration settings for schema reconstruction and annotation repair.

These settings can be overridden via environment variables; each component
also accepts an explicit SchemaConfig so callers (and tests) can run with
isolated settings.
"""

import logging

from .env_utils import getenv_bool, getenv_clean, getenv_int

logger = logging.getLogger(__name__)

DEFAULT_NOT_APPLICABLE_URI = "http://www.bioassayontology.org/bat#NotApplicable"


class SchemaConfig:
    """Runtime configuration, resolved from the environment on instantiation.

    STRICT_GROUP_NEST makes the hierarchy builder reject group-nests that carry
    a duplication suffix anywhere but the leading element. Composite schemas
    produced by duplicating a group that itself contains subgroups do put
    suffixes deeper in the nest, so this is off unless explicitly requested.

    STRICT_FORM_FIELDS makes entry-form parsing raise when a layout field
    refers to an assignment that is not in the schema, instead of logging it.
    """

    def __init__(self):
        self.LOG_LEVEL = getenv_clean("ANNOTATION_SCHEMA_LOG_LEVEL", "INFO")
        self.STRICT_GROUP_NEST = getenv_bool("ANNOTATION_SCHEMA_STRICT_GROUP_NEST", False)
        self.STRICT_FORM_FIELDS = getenv_bool("ANNOTATION_SCHEMA_STRICT_FORM_FIELDS", False)

        # 0 means unbounded
        self.TEMPLATE_CACHE_MAX_ENTRIES = max(0, getenv_int("ANNOTATION_SCHEMA_TEMPLATE_CACHE_MAX_ENTRIES", 0))

        self.NOT_APPLICABLE_URI = getenv_clean(
            "ANNOTATION_SCHEMA_NOT_APPLICABLE_URI", DEFAULT_NOT_APPLICABLE_URI
        )


# Singleton instance
schema_config = SchemaConfig()
