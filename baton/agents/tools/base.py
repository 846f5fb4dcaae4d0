"""
Tool abstraction.

A static tool is a pydantic model whose model-visible parameters are fields
annotated with :class:`ToolParameter`::

    class GetCurrentWeatherTool(Tool):
        tool_description = "Get the current weather in a given location"

        location: Annotated[Optional[str], ToolParameter("The city and state", required=True)] = None

        def run(self) -> str:
            return f"It is currently 20 degrees in {self.location}"

A :class:`DynamicTool` declares its parameters at runtime instead, which is
how MCP tools are exposed.
"""

import collections.abc
import importlib
import inspect
import logging
import types
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import (
    Annotated, Any, ClassVar, Dict, List, Optional, Sequence, Tuple, Type, Union,
    get_args, get_origin
)

from pydantic import BaseModel, ConfigDict, PrivateAttr
from pydantic.fields import FieldInfo

from ..core.enums import ParameterType
from ..utils.strings import strip_suffix, to_snake_case

logger = logging.getLogger(__name__)

_ARRAY_ORIGINS = (
    list, tuple, set, frozenset,
    collections.abc.Sequence, collections.abc.MutableSequence,
    collections.abc.Set, collections.abc.MutableSet,
)
_OBJECT_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)


@dataclass(frozen=True, eq=False)
class ToolParameter:
    """Marks a model field as a tool parameter.

    Args:
        description: Text shown to the model
        required: Whether the model must always supply the argument
        enum: Fixed set of allowed values
        derived_enum: Name of a method, on the tool or on the nested object
            declaring the field, that returns the allowed values
        items_type: JSON type of array items when it cannot be inferred
        object_class: Pydantic model class (or dotted path) describing an
            object value or the items of an array of objects
        schema: Pre-built JSON-Schema fragment used verbatim
    """

    description: Optional[str] = None
    required: bool = False
    enum: Optional[Sequence[Any]] = None
    derived_enum: Optional[str] = None
    items_type: Optional[str] = None
    object_class: Optional[Union[type, str]] = None
    schema: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        if self.object_class is not None and self.items_type is None:
            object.__setattr__(self, "items_type", ParameterType.OBJECT.value)
        if self.enum is not None:
            object.__setattr__(self, "enum", tuple(self.enum))


def unwrap_annotation(annotation: Any) -> Any:
    """Strip ``Optional[...]`` and ``Annotated[...]`` wrappers."""
    origin = get_origin(annotation)
    if origin is Annotated:
        return unwrap_annotation(get_args(annotation)[0])
    if origin is Union or origin is types.UnionType:
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return unwrap_annotation(args[0])
    return annotation


def is_model_class(value: Any) -> bool:
    return inspect.isclass(value) and issubclass(value, BaseModel)


def parameter_type_for(annotation: Any) -> ParameterType:
    """Map a Python annotation onto a JSON-Schema type."""
    annotation = unwrap_annotation(annotation)
    origin = get_origin(annotation) or annotation
    if origin in _ARRAY_ORIGINS:
        return ParameterType.ARRAY
    if origin in _OBJECT_ORIGINS or is_model_class(origin):
        return ParameterType.OBJECT
    # bool is a subclass of int
    if origin is bool:
        return ParameterType.BOOLEAN
    if origin is int:
        return ParameterType.INTEGER
    if origin is float:
        return ParameterType.NUMBER
    return ParameterType.STRING


def item_annotation_for(annotation: Any) -> Optional[Any]:
    annotation = unwrap_annotation(annotation)
    args = [arg for arg in get_args(annotation) if arg is not Ellipsis]
    return unwrap_annotation(args[0]) if args else None


def import_object_class(path: str) -> Optional[type]:
    """Resolve ``"package.module.Class"`` or ``"package.module:Class"``."""
    module_name, _, class_name = path.replace(":", ".").rpartition(".")
    if not module_name:
        return None
    try:
        candidate = getattr(importlib.import_module(module_name), class_name, None)
    except ImportError as e:
        logger.warning(f"Cannot import object class {path}: {e}")
        return None
    return candidate if is_model_class(candidate) else None


def resolve_object_class(parameter: Optional[ToolParameter], annotation: Any = None) -> Optional[Type[BaseModel]]:
    """Find the model class describing an object parameter or object array items."""
    declared = parameter.object_class if parameter is not None else None
    if isinstance(declared, str):
        return import_object_class(declared)
    if declared is not None:
        return declared if is_model_class(declared) else None
    if annotation is None:
        return None
    inner = unwrap_annotation(annotation)
    if is_model_class(inner):
        return inner
    if parameter_type_for(inner) is ParameterType.ARRAY and is_model_class(item_annotation_for(inner)):
        return item_annotation_for(inner)
    return None


def declared_parameters(model_class: Type[BaseModel]) -> List[Tuple[str, FieldInfo, ToolParameter]]:
    """Fields of ``model_class`` carrying a :class:`ToolParameter`, in declaration order."""
    parameters = []
    for field_name, field in model_class.model_fields.items():
        for metadata in field.metadata:
            if isinstance(metadata, ToolParameter):
                parameters.append((field_name, field, metadata))
                break
    return parameters


def cast_to_object(value: Any, object_class: Type[BaseModel]) -> BaseModel:
    """Copy a decoded JSON object onto a fresh ``object_class`` instance.

    The instance is created without running validation. Nested object and
    object-array fields are cast recursively. Keys that are not fields of
    ``object_class`` are dropped.
    """
    if isinstance(value, object_class):
        return value
    if not isinstance(value, dict):
        raise TypeError(f"Expected an object for {object_class.__name__}, got {type(value).__name__}")

    instance = object_class.model_construct()
    for key, item in value.items():
        field = object_class.model_fields.get(key)
        if field is None:
            logger.debug(f"Dropping unknown key {key} for {object_class.__name__}")
            continue
        parameter = next((m for m in field.metadata if isinstance(m, ToolParameter)), None)
        setattr(instance, key, cast_value(item, field.annotation, parameter))
    return instance


def cast_array_to_objects(value: Any, object_class: Type[BaseModel]) -> List[BaseModel]:
    if not isinstance(value, list):
        raise TypeError(f"Expected an array of {object_class.__name__}, got {type(value).__name__}")
    return [cast_to_object(item, object_class) for item in value]


def cast_value(value: Any, annotation: Any, parameter: Optional[ToolParameter]) -> Any:
    """Cast a decoded argument according to the declared field type."""
    if value is None:
        return None
    object_class = resolve_object_class(parameter, annotation)
    if object_class is None:
        return value
    kind = parameter_type_for(annotation) if annotation is not None else ParameterType.OBJECT
    if kind is ParameterType.ARRAY:
        return cast_array_to_objects(value, object_class)
    return cast_to_object(value, object_class)


class Tool(BaseModel, ABC):
    """Base class for every tool exposed to a model.

    Subclasses implement :meth:`run`, which may be a coroutine function.
    The tool name defaults to the class name without its ``Tool`` suffix in
    snake_case; set ``tool_name`` / ``tool_description`` to override.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, validate_assignment=True)

    tool_name: ClassVar[Optional[str]] = None
    tool_description: ClassVar[Optional[str]] = None

    def name(self) -> str:
        if self.tool_name:
            return self.tool_name
        return to_snake_case(strip_suffix(type(self).__name__, "Tool"))

    def description(self) -> Optional[str]:
        return self.tool_description

    @abstractmethod
    def run(self) -> Any:
        """Execute the tool with its bound parameters."""
        pass

    async def __call__(self) -> Any:
        result = self.run()
        if inspect.isawaitable(result):
            result = await result
        return result

    def clone(self) -> "Tool":
        """Independent copy used for one execution, leaving this prototype untouched."""
        return self.model_copy(deep=True)

    def bind(self, name: str, value: Any) -> None:
        """Assign one model supplied argument, casting nested objects.

        Scalar values are validated against the field type, so a mismatch
        raises ``pydantic.ValidationError``.
        """
        field = type(self).model_fields.get(name)
        if field is None:
            logger.warning(f"Tool {self.name()} received unknown argument {name}")
            return
        parameter = next((m for m in field.metadata if isinstance(m, ToolParameter)), None)
        setattr(self, name, cast_value(value, field.annotation, parameter))


@dataclass
class DynamicProperty:
    """A parameter declared at runtime on a :class:`DynamicTool`."""

    name: str
    type: str = ParameterType.STRING.value
    description: Optional[str] = None
    required: bool = False
    enum: Optional[List[Any]] = None
    items_type: Optional[str] = None
    object_class: Optional[Union[type, str]] = None
    schema: Optional[Dict[str, Any]] = None

    def object_model(self) -> Optional[Type[BaseModel]]:
        if self.object_class is None:
            return None
        return resolve_object_class(ToolParameter(object_class=self.object_class))


class DynamicTool(Tool):
    """Tool whose parameters are registered at runtime."""

    _name: Optional[str] = PrivateAttr(default=None)
    _description: Optional[str] = PrivateAttr(default=None)
    _properties: Dict[str, DynamicProperty] = PrivateAttr(default_factory=dict)
    _values: Dict[str, Any] = PrivateAttr(default_factory=dict)

    def name(self) -> str:
        return self._name or super().name()

    def description(self) -> Optional[str]:
        return self._description if self._description is not None else super().description()

    def with_name(self, name: str) -> "DynamicTool":
        self._name = name
        return self

    def with_description(self, description: Optional[str]) -> "DynamicTool":
        self._description = description
        return self

    def add_property(
        self,
        name: str,
        type: str = ParameterType.STRING.value,
        description: Optional[str] = None,
        required: bool = False,
        enum: Optional[List[Any]] = None,
        items_type: Optional[str] = None,
        object_class: Optional[Union[type, str]] = None,
        schema: Optional[Dict[str, Any]] = None,
    ) -> "DynamicTool":
        """Register a parameter. Registering a name again replaces it."""
        if object_class is not None and items_type is None:
            items_type = ParameterType.OBJECT.value
        self._properties[name] = DynamicProperty(
            name=name,
            type=str(type),
            description=description,
            required=required,
            enum=list(enum) if enum is not None else None,
            items_type=items_type,
            object_class=object_class,
            schema=schema,
        )
        return self

    def properties(self) -> Dict[str, DynamicProperty]:
        return dict(self._properties)

    def bind(self, name: str, value: Any) -> None:
        self.set_value(name, value)

    def set_value(self, name: str, value: Any) -> None:
        prop = self._properties.get(name)
        object_class = prop.object_model() if prop is not None else None
        if object_class is not None and value is not None:
            if prop.type == ParameterType.ARRAY.value:
                value = cast_array_to_objects(value, object_class)
            elif prop.type == ParameterType.OBJECT.value:
                value = cast_to_object(value, object_class)
        self._values[name] = value

    def get_value(self, name: str, default: Any = None) -> Any:
        return self._values.get(name, default)

    def values(self) -> Dict[str, Any]:
        return dict(self._values)

    def get_string(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._typed(name, default, (str,), "a string")

    def get_number(self, name: str, default: Optional[float] = None) -> Optional[float]:
        value = self._typed(name, default, (int, float), "a number")
        if isinstance(value, bool):
            raise TypeError(f"Parameter {name} of {self.name()} is not a number")
        return value

    def get_bool(self, name: str, default: Optional[bool] = None) -> Optional[bool]:
        return self._typed(name, default, (bool,), "a boolean")

    def get_object(self, name: str, default: Any = None) -> Any:
        return self._typed(name, default, (dict, BaseModel), "an object")

    def get_array(self, name: str, default: Optional[list] = None) -> Optional[list]:
        return self._typed(name, default, (list,), "an array")

    def _typed(self, name: str, default: Any, expected: tuple, label: str) -> Any:
        value = self._values.get(name)
        if value is None:
            return default
        if not isinstance(value, expected):
            raise TypeError(f"Parameter {name} of {self.name()} is not {label}")
        return value

    def clone(self) -> "DynamicTool":
        clone = self.model_copy()
        clone._properties = dict(self._properties)
        clone._values = dict(self._values)
        return clone
