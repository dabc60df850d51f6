"""Raw JSON Schema features attached to schema nodes.

Some validations have no structural JSON Schema equivalent. Callers can
attach the JSON Schema they want to see for such a node, either on the node
itself (`with_json_schema_features`) or as a pipe step
(`json_schema_metadata`). Both are merged over the converted shape and win
on key collisions.
"""

import logging
from typing import Any, Dict, Optional

from schematojsons.nodes import Action, SchemaNode

logger = logging.getLogger(__name__)

JSON_SCHEMA_FEATURES_KEY = '__json_schema_features'
JSON_SCHEMA_METADATA_TYPE = 'json_schema_metadata'


def with_json_schema_features(schema: SchemaNode, features: Dict[str, Any]) -> SchemaNode:
    """
    Attach raw JSON Schema features to a schema node and return the node.

    The node keeps its identity, so it can still be registered as a named
    definition afterwards.
    """
    setattr(schema, JSON_SCHEMA_FEATURES_KEY, dict(features))
    return schema


def get_json_schema_features(schema: Any) -> Optional[Dict[str, Any]]:
    return getattr(schema, JSON_SCHEMA_FEATURES_KEY, None)


def assign_extra_json_schema_features(schema: Any, converted: Dict[str, Any]) -> Dict[str, Any]:
    """Merge the features attached to `schema` onto `converted`, in place."""
    features = get_json_schema_features(schema)
    if features:
        logger.debug("Applying JSON Schema features %s to %s schema", sorted(features), getattr(schema, 'type', schema))
        converted.update(features)
    return converted


def json_schema_metadata(metadata: Dict[str, Any]) -> Action:
    """Pipe step merging a raw JSON Schema fragment in pipe order."""
    return Action('metadata', JSON_SCHEMA_METADATA_TYPE, metadata=dict(metadata))
