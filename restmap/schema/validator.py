"""
Schema validation for controller actions.

A SchemaValidator wraps one JSON schema and turns raw request parameters
into the mapping a handler receives: string scalars coerced to their
declared types, declared defaults filled in, undeclared keys dropped, and
the result checked with ``jsonschema``. Violations are reported together as
a single InvalidParamsFault.

Two definition forms are accepted::

    # Full JSON schema
    {"type": "object", "properties": {"id": {"type": "integer", "minimum": 1}},
     "required": ["id"]}

    # Shorthand: property name -> property schema
    {"id": {"type": "integer", "min": 1, "required": True}}
"""

from __future__ import annotations

import copy
import logging
import math
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

from jsonschema import Draft7Validator, validators
from jsonschema.exceptions import SchemaError, ValidationError

from ..faults import InvalidParamsFault, SchemaDefinitionFault

if TYPE_CHECKING:
    from ..config import RestConfig


logger = logging.getLogger("restmap.schema")

__all__ = [
    "SchemaValidator",
    "normalize_schema",
]


# Keys that mark a definition as a full JSON schema rather than the shorthand
_SCHEMA_KEYWORDS = frozenset({
    "$schema", "$id", "$ref", "$defs", "definitions",
    "type", "properties", "required", "additionalProperties",
    "patternProperties", "items", "enum", "const",
    "allOf", "anyOf", "oneOf", "not",
})

_PROPERTY_ALIASES = (("min", "minimum"), ("max", "maximum"))

_TRUE_STRINGS = frozenset({"true", "1", "yes", "on"})
_FALSE_STRINGS = frozenset({"false", "0", "no", "off"})


# ═══════════════════════════════════════════════════════════════════════════
#  Definition normalization
# ═══════════════════════════════════════════════════════════════════════════

def _is_shorthand(definition: Mapping[str, Any]) -> bool:
    if any(key in _SCHEMA_KEYWORDS for key in definition):
        return False
    return all(isinstance(value, Mapping) for value in definition.values())


def _normalize_property(prop: Mapping[str, Any]) -> Dict[str, Any]:
    prop = dict(prop)
    for alias, keyword in _PROPERTY_ALIASES:
        if alias in prop:
            prop.setdefault(keyword, prop.pop(alias))
    return _normalize_children(prop)


def _normalize_children(schema: Dict[str, Any]) -> Dict[str, Any]:
    """Rewrite ``min``/``max`` and boolean ``required`` at every nesting level."""
    properties = schema.get("properties")
    if isinstance(properties, Mapping):
        normalized: Dict[str, Any] = {}
        required: List[str] = []
        for name, prop in properties.items():
            if isinstance(prop, Mapping):
                prop = _normalize_property(prop)
                if isinstance(prop.get("required"), bool):
                    if prop.pop("required"):
                        required.append(name)
            normalized[name] = prop
        schema["properties"] = normalized
        if required:
            existing = schema.get("required")
            merged = list(existing) if isinstance(existing, list) else []
            merged.extend(name for name in required if name not in merged)
            schema["required"] = merged

    items = schema.get("items")
    if isinstance(items, Mapping):
        schema["items"] = _normalize_property(items)
    elif isinstance(items, list):
        schema["items"] = [
            _normalize_property(item) if isinstance(item, Mapping) else item
            for item in items
        ]
    return schema


def normalize_schema(definition: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Return ``definition`` as a full JSON schema.

    Empty or ``None`` definitions normalize to ``{}`` (accept anything).
    The ``min``/``max`` aliases and boolean ``required`` flags are accepted
    on any property schema, in either form and at any depth.
    """
    if not definition:
        return {}

    if not isinstance(definition, Mapping):
        raise SchemaDefinitionFault(
            f"expected a mapping, got {type(definition).__name__}"
        )

    if not _is_shorthand(definition):
        return _normalize_children(copy.deepcopy(dict(definition)))

    return _normalize_children({
        "type": "object",
        "properties": copy.deepcopy(dict(definition)),
    })


# ═══════════════════════════════════════════════════════════════════════════
#  Coercion
# ═══════════════════════════════════════════════════════════════════════════

def _coerce_scalar(value: Any, declared: Any) -> Any:
    """Convert a string to the declared JSON type; unchanged if it can't."""
    if not isinstance(value, str) or declared is None:
        return value

    types = declared if isinstance(declared, list) else [declared]
    if "string" in types:
        return value

    text = value.strip()
    for kind in types:
        if kind == "integer":
            try:
                return int(text)
            except ValueError:
                continue
        elif kind == "number":
            try:
                return int(text)
            except ValueError:
                pass
            try:
                number = float(text)
            except ValueError:
                continue
            if math.isfinite(number):
                return number
        elif kind == "boolean":
            lowered = text.lower()
            if lowered in _TRUE_STRINGS:
                return True
            if lowered in _FALSE_STRINGS:
                return False
        elif kind == "null" and text.lower() in ("", "null"):
            return None
    return value


def _format_error(error: ValidationError) -> str:
    path = ".".join(str(part) for part in error.absolute_path)
    return f"{path}: {error.message}" if path else error.message


# ═══════════════════════════════════════════════════════════════════════════
#  Validator
# ═══════════════════════════════════════════════════════════════════════════

class SchemaValidator:
    """
    Validate and filter parameter mappings against a JSON schema.

    Args:
        definition: Full JSON schema or shorthand property map. Empty means
            pass-through: ``validate`` returns its argument untouched.
        coerce: Convert string values to the declared number/integer/
            boolean type before validating. ``None`` (the default) leaves
            the choice to the controller's ``RestConfig.coerce_params``
            and means ``True`` for a validator used on its own.
        strip_unknown: Drop keys not declared in ``properties`` unless the
            schema sets ``additionalProperties`` itself. ``None`` follows
            ``RestConfig.strip_unknown_params`` the same way.

    Raises:
        SchemaDefinitionFault: the definition is not a valid JSON schema.
    """

    def __init__(
        self,
        definition: Optional[Mapping[str, Any]] = None,
        *,
        coerce: Optional[bool] = None,
        strip_unknown: Optional[bool] = None,
    ):
        self._coerce = coerce
        self._strip_unknown = strip_unknown
        self._schema = normalize_schema(definition)
        self._validator = self._compile(self._schema) if self._schema else None

    @staticmethod
    def _compile(schema: Dict[str, Any]):
        validator_class = validators.validator_for(schema, default=Draft7Validator)
        try:
            validator_class.check_schema(schema)
        except SchemaError as exc:
            raise SchemaDefinitionFault(exc.message) from exc
        return validator_class(schema)

    @property
    def schema(self) -> Dict[str, Any]:
        return self._schema

    @property
    def is_empty(self) -> bool:
        return not self._schema

    @property
    def coerce(self) -> bool:
        return True if self._coerce is None else self._coerce

    @property
    def strip_unknown(self) -> bool:
        return True if self._strip_unknown is None else self._strip_unknown

    def bind(self, config: "RestConfig") -> "SchemaValidator":
        """
        Return this validator with unset options taken from ``config``.

        Options passed explicitly to the constructor are kept. Returns
        ``self`` when there is nothing left to fill in.
        """
        if self._coerce is not None and self._strip_unknown is not None:
            return self
        bound = copy.copy(self)
        if bound._coerce is None:
            bound._coerce = config.coerce_params
        if bound._strip_unknown is None:
            bound._strip_unknown = config.strip_unknown_params
        return bound

    def describe(self) -> Dict[str, Any]:
        """Copy of the normalized schema, for documentation."""
        return copy.deepcopy(self._schema)

    def validate(self, params: Any, *, action: Optional[str] = None) -> Any:
        """
        Return the filtered parameters, or raise InvalidParamsFault.

        Args:
            params: Raw parameters (normally a mapping)
            action: Action name, recorded on the fault for diagnostics
        """
        if self._validator is None:
            return params

        prepared = self._prepare(self._schema, params)
        errors = sorted(self._validator.iter_errors(prepared), key=lambda e: e.json_path)
        if errors:
            messages = [_format_error(error) for error in errors]
            logger.debug("Rejected parameters for %s: %s", action or "<schema>", messages)
            raise InvalidParamsFault(messages, action=action)
        return prepared

    def is_valid(self, params: Any) -> bool:
        try:
            self.validate(params)
        except InvalidParamsFault:
            return False
        return True

    # ── preparation ────────────────────────────────────────────────────

    def _prepare(self, schema: Mapping[str, Any], value: Any) -> Any:
        if not isinstance(value, Mapping) or not isinstance(schema, Mapping):
            return value

        properties = schema.get("properties")
        if not isinstance(properties, Mapping):
            return dict(value)

        keep_unknown = (
            not self.strip_unknown
            or "additionalProperties" in schema
            or "patternProperties" in schema
        )

        result: Dict[str, Any] = {}
        for key, item in value.items():
            if key in properties:
                result[key] = self._prepare_property(properties[key], item)
            elif keep_unknown:
                result[key] = item

        for name, prop in properties.items():
            if name not in result and isinstance(prop, Mapping) and "default" in prop:
                result[name] = copy.deepcopy(prop["default"])
        return result

    def _prepare_property(self, prop: Any, item: Any) -> Any:
        if not isinstance(prop, Mapping):
            return item
        if self.coerce:
            item = _coerce_scalar(item, prop.get("type"))
        if isinstance(item, Mapping):
            return self._prepare(prop, item)
        items = prop.get("items")
        if isinstance(item, list) and isinstance(items, Mapping):
            return [self._prepare_property(items, element) for element in item]
        return item

    def __repr__(self) -> str:
        keys = list(self._schema.get("properties", {}))
        return f"{self.__class__.__name__}(properties={keys})"
