"""Validation and cleanup of the parameter schemas callers declare with their tools."""

from typing import Any, Dict, Iterator, List, Optional, Tuple

import jsonref  # type: ignore

from ...exceptions import ToolValidationError
from ...logger import get_logger

logger = get_logger(__name__)

METADATA_KEYS = ("$defs", "$schema", "$id", "title", "definitions")


def _local_target(ref: Any, definitions: Dict[str, Any]) -> Optional[Any]:
    """Definition a local pointer such as ``#/$defs/TeamFilter`` refers to."""
    if not isinstance(ref, str) or not ref.startswith("#/"):
        return None
    segments = ref[2:].split("/")
    if len(segments) < 2:
        return None
    return definitions.get(segments[-1])


def _children(node: Any) -> Iterator[Any]:
    if isinstance(node, dict):
        yield from node.values()
    elif isinstance(node, list):
        yield from node


def _single_type(union: List[Any]) -> Optional[Dict[str, Any]]:
    """The only non-null member of an ``anyOf``, if there is exactly one."""
    members = [m for m in union if not (isinstance(m, dict) and m.get("type") == "null")]
    if len(members) == 1 and isinstance(members[0], dict):
        return members[0]
    return None


class SchemaValidator:
    """Static helpers applied to every declared parameter schema before it is stored."""

    @staticmethod
    def assert_no_recursive_refs(schema: Dict[str, Any]) -> None:
        """
        Walk the schema following local references and fail on the first cycle.

        Raises:
            ToolValidationError: If a reference leads back to itself.
        """
        definitions = schema.get("$defs") or schema.get("definitions") or {}
        pending: List[Tuple[Any, frozenset]] = [(schema, frozenset())]

        while pending:
            node, followed = pending.pop()
            ref = node.get("$ref") if isinstance(node, dict) else None
            if ref is None:
                pending.extend((child, followed) for child in _children(node))
                continue
            if ref in followed:
                msg = f"Recursive structure detected: {ref}. Tool parameters must be flat."
                logger.error(msg)
                raise ToolValidationError(msg)
            target = _local_target(ref, definitions)
            if target is not None:
                pending.append((target, followed | {ref}))

    @staticmethod
    def resolve_refs(schema: Dict[str, Any]) -> Dict[str, Any]:
        """Inline local ``$ref`` pointers once they are known not to recurse."""
        SchemaValidator.assert_no_recursive_refs(schema)
        # proxies=False gives back plain dicts instead of JsonRef objects
        return jsonref.replace_refs(schema, proxies=False)

    @staticmethod
    def sanitize_schema(schema: Any) -> Any:
        """
        Strip metadata keys and collapse ``Optional`` unions.

        ``anyOf: [X, null]`` becomes ``X``, keeping the outer description.
        Keys inside ``properties`` are argument names, never metadata.

        Args:
            schema: Any JSON schema fragment.

        Returns:
            A cleaned copy; non-dict values are returned as they are.
        """
        if not isinstance(schema, dict):
            return schema

        union = schema.get("anyOf")
        if isinstance(union, list):
            member = _single_type(union)
            if member is not None:
                collapsed = dict(member)
                if "description" in schema:
                    collapsed["description"] = schema["description"]
                return SchemaValidator.sanitize_schema(collapsed)

        cleaned: Dict[str, Any] = {}
        for key, value in schema.items():
            if key in METADATA_KEYS:
                continue
            if key == "properties" and isinstance(value, dict):
                cleaned[key] = {arg: SchemaValidator.sanitize_schema(sub) for arg, sub in value.items()}
            elif isinstance(value, list):
                cleaned[key] = [SchemaValidator.sanitize_schema(item) for item in value]
            else:
                cleaned[key] = SchemaValidator.sanitize_schema(value)
        return cleaned

    @staticmethod
    def parameter_names(schema: Any) -> List[str]:
        """List the top-level argument names a schema declares."""
        properties = schema.get("properties") if isinstance(schema, dict) else None
        return list(properties) if isinstance(properties, dict) else []
