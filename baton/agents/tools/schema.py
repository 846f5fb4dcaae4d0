"""
Tool schema compiler.

Turns a tool declaration into the provider-neutral function definition::

    {"name": ..., "description": ..., "parameters": {"type": "object",
                                                      "properties": {...},
                                                      "required": [...]}}

``parameters`` is omitted for tools without parameters and ``description``
is omitted when the tool has none.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple, Type

from pydantic import BaseModel

from ..core.enums import ParameterType
from .base import (
    DynamicProperty, DynamicTool, Tool, ToolParameter, declared_parameters,
    item_annotation_for, parameter_type_for, resolve_object_class,
)

logger = logging.getLogger(__name__)


class ToolSchemaCompiler:
    """Compiles tools into JSON-Schema function definitions.

    Compilation is pure: the same tool always compiles to the same
    definition, and the tool itself is never modified.
    """

    def compile(self, tool: Tool) -> Dict[str, Any]:
        definition: Dict[str, Any] = {"name": tool.name()}
        description = tool.description()
        if description is not None:
            definition["description"] = description

        if isinstance(tool, DynamicTool):
            properties, required = self._compile_dynamic(tool)
        else:
            properties, required = self._compile_model(type(tool), tool)

        if properties:
            definition["parameters"] = {
                "type": ParameterType.OBJECT.value,
                "properties": properties,
                "required": required,
            }
        return definition

    def _compile_model(
        self,
        model_class: Type[BaseModel],
        instance: Optional[BaseModel],
    ) -> Tuple[Dict[str, Any], List[str]]:
        properties: Dict[str, Any] = {}
        required: List[str] = []

        for field_name, field, parameter in declared_parameters(model_class):
            if parameter.required:
                required.append(field_name)
            if parameter.schema is not None:
                properties[field_name] = dict(parameter.schema)
                continue
            properties[field_name] = self._compile_parameter(field.annotation, parameter, instance)

        return properties, required

    def _compile_parameter(self, annotation: Any, parameter: ToolParameter, instance: Optional[BaseModel]) -> Dict[str, Any]:
        kind = parameter_type_for(annotation)
        schema: Dict[str, Any] = {"type": kind.value}
        if parameter.description is not None:
            schema["description"] = parameter.description

        enum = self._enum_values(parameter, instance)
        if enum is not None:
            schema["enum"] = enum

        object_class = resolve_object_class(parameter, annotation)
        if kind is ParameterType.ARRAY:
            items_type = parameter.items_type
            item_annotation = item_annotation_for(annotation)
            if items_type is None and item_annotation is not None:
                items_type = parameter_type_for(item_annotation).value
            if items_type is not None:
                schema["items"] = self._compile_items(items_type, object_class)
        elif kind is ParameterType.OBJECT:
            self._add_nested(schema, object_class)

        return schema

    def _compile_items(self, items_type: str, object_class: Optional[Type[BaseModel]]) -> Dict[str, Any]:
        items: Dict[str, Any] = {"type": items_type}
        if items_type == ParameterType.OBJECT.value:
            self._add_nested(items, object_class, always_required=True)
        return items

    def _add_nested(self, schema: Dict[str, Any], object_class: Optional[Type[BaseModel]], always_required: bool = False) -> None:
        if object_class is None:
            return
        nested_properties, nested_required = self._compile_model(object_class, self._nested_instance(object_class))
        schema["properties"] = nested_properties
        if nested_required or always_required:
            schema["required"] = nested_required

    @staticmethod
    def _nested_instance(object_class: Type[BaseModel]) -> Optional[BaseModel]:
        try:
            return object_class.model_construct()
        except Exception as e:
            logger.debug(f"Cannot instantiate {object_class.__name__} for enum derivation: {e}")
            return None

    @staticmethod
    def _enum_values(parameter: ToolParameter, instance: Optional[Any]) -> Optional[List[Any]]:
        if parameter.enum is not None:
            return list(parameter.enum)
        if parameter.derived_enum is None or instance is None:
            return None
        method = getattr(instance, parameter.derived_enum, None)
        if not callable(method):
            logger.warning(f"Enum source {parameter.derived_enum} not found on {type(instance).__name__}")
            return None
        return list(method())

    def _compile_dynamic(self, tool: DynamicTool) -> Tuple[Dict[str, Any], List[str]]:
        properties: Dict[str, Any] = {}
        required: List[str] = []

        for name, prop in tool.properties().items():
            if prop.required:
                required.append(name)
            if prop.schema is not None:
                properties[name] = dict(prop.schema)
                continue
            properties[name] = self._compile_dynamic_property(prop)

        return properties, required

    def _compile_dynamic_property(self, prop: DynamicProperty) -> Dict[str, Any]:
        schema: Dict[str, Any] = {"type": prop.type}
        if prop.description is not None:
            schema["description"] = prop.description
        if prop.enum is not None:
            schema["enum"] = list(prop.enum)

        object_class = prop.object_model()
        if prop.type == ParameterType.ARRAY.value and prop.items_type is not None:
            schema["items"] = self._compile_items(prop.items_type, object_class)
        elif prop.type == ParameterType.OBJECT.value:
            self._add_nested(schema, object_class)
        return schema


_compiler = ToolSchemaCompiler()


def compile_tool(tool: Tool) -> Dict[str, Any]:
    """Compile ``tool`` with the shared compiler."""
    return _compiler.compile(tool)
