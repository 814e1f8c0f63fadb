"""Binding of parsed values into caller-supplied destinations.

The parser talks to destinations through four operations (the `Binder`
protocol). Two implementations are provided: `DataclassBinder`, which resolves
locations through a `Schema` built once per dataclass type, and `DictBinder`,
which grows plain nested dictionaries.
"""

from __future__ import annotations

import dataclasses
import functools
import types
import typing
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from .exceptions import BindingError, SchemaError
from .naming import attribute_to_field_name, to_field_name

INI_NAME_METADATA_KEY = "ini_name"


@runtime_checkable
class Binder(Protocol):
    """Operations the parser invokes on a destination.

    An empty `path` addresses the destination root. Every operation raises
    `BindingError` when the location is missing or has another shape.
    """

    def set_scalar(self, path: str, key: str, value: str) -> None: ...

    def append_list_item(self, path: str, key: str, value: str) -> None: ...

    def set_map_entry(self, map_name: str, key: str, value: str) -> None: ...

    def set_submap_entry(self, map_name: str, sub_map_key: str, key: str, value: str) -> None: ...


class SlotShape(Enum):
    """Shapes a destination location can have."""

    SCALAR = "scalar"
    SEQUENCE = "ordered sequence"
    MAP = "map"
    NESTED_MAP = "map of maps"
    SECTION = "section"


@dataclass(frozen=True)
class Slot:
    """A typed location on a destination.

    Attributes:
        attribute: Python attribute holding the value.
        shape: Shape of the value stored there.
        section: Schema of the nested dataclass for `SlotShape.SECTION` slots.
    """

    attribute: str
    shape: SlotShape
    section: Schema | None = None


@dataclass(frozen=True)
class Schema:
    """Static description of a destination dataclass.

    Attributes:
        type_: Described dataclass type.
        slots: Slots keyed by normalized field name (``ServerHttp``).
        aliases: Other spellings that resolve to a slot, such as ``Log_dir``
            for a ``log_dir`` attribute, mapped to the slot name.
    """

    type_: type
    slots: dict[str, Slot]
    aliases: dict[str, str] = dataclasses.field(default_factory=dict)

    @classmethod
    def from_dataclass(cls, type_: type) -> Schema:
        """Build (or fetch the cached) schema for a dataclass type.

        Supported annotations are ``str``, ``list[str]``, ``dict[str, str]``,
        ``dict[str, dict[str, str]]`` and, on the root type only, nested
        dataclasses made of the first two.

        Raises:
            SchemaError: If `type_` is not a dataclass, or a field has an
                unsupported annotation or a duplicate normalized name.

        Examples:
            Schema.from_dataclass(Config).lookup("ServerHttp").shape  # SlotShape.SECTION
        """
        return _build_schema(type_, nested=False)

    def lookup(self, name: str) -> Slot | None:
        slot = self.slots.get(name)
        if slot is None and name in self.aliases:
            slot = self.slots[self.aliases[name]]
        return slot


@functools.lru_cache(maxsize=None)
def _build_schema(type_: type, nested: bool) -> Schema:
    if not (isinstance(type_, type) and dataclasses.is_dataclass(type_)):
        raise SchemaError(f"{type_!r} is not a dataclass type")

    try:
        hints = typing.get_type_hints(type_)
    except (NameError, TypeError) as error:
        raise SchemaError(f"Cannot resolve annotations of {type_.__name__}: {error}") from error

    slots: dict[str, Slot] = {}
    aliases: dict[str, str] = {}
    for field in dataclasses.fields(type_):
        annotation = _unwrap_optional(hints[field.name])
        shape = _shape_of(annotation)
        if shape is None:
            raise SchemaError(
                f"{type_.__name__}.{field.name}: unsupported annotation {hints[field.name]!r}"
            )

        section = None
        if shape is SlotShape.SECTION:
            if nested:
                raise SchemaError(f"{type_.__name__}.{field.name}: sections cannot be nested")
            section = _build_schema(annotation, nested=True)
            allowed = (SlotShape.SCALAR, SlotShape.SEQUENCE)
            if any(slot.shape not in allowed for slot in section.slots.values()):
                raise SchemaError(
                    f"{type_.__name__}.{field.name}: sections may only hold scalars and lists"
                )

        ini_name = field.metadata.get(INI_NAME_METADATA_KEY)
        name = ini_name or attribute_to_field_name(field.name)
        _claim(type_, name, slots, aliases)
        slots[name] = Slot(attribute=field.name, shape=shape, section=section)

        # Keys like `log_dir` normalize to `Log_dir`, not `LogDir`.
        alias = to_field_name(field.name)
        if not ini_name and alias != name:
            _claim(type_, alias, slots, aliases)
            aliases[alias] = name

    return Schema(type_=type_, slots=slots, aliases=aliases)


def _claim(type_: type, name: str, slots: dict[str, Slot], aliases: dict[str, str]) -> None:
    if name in slots or name in aliases:
        raise SchemaError(f"{type_.__name__}: duplicate field name {name!r}")


def _unwrap_optional(annotation: Any) -> Any:
    # Optional[X] binds like X; None only marks "not created yet".
    if typing.get_origin(annotation) in (typing.Union, types.UnionType):
        members = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(members) == 1:
            return members[0]
    return annotation


def _shape_of(annotation: Any) -> SlotShape | None:
    if annotation is str:
        return SlotShape.SCALAR
    if isinstance(annotation, type) and dataclasses.is_dataclass(annotation):
        return SlotShape.SECTION

    origin = typing.get_origin(annotation)
    args = typing.get_args(annotation)
    if origin is list and args == (str,):
        return SlotShape.SEQUENCE
    if origin is dict and len(args) == 2 and args[0] is str:
        if args[1] is str:
            return SlotShape.MAP
        if typing.get_origin(args[1]) is dict and typing.get_args(args[1]) == (str, str):
            return SlotShape.NESTED_MAP
    return None


class DataclassBinder:
    """Bind values into a dataclass instance through its `Schema`.

    Sections, lists, and maps that are still None on the destination are
    created on first use.

    Examples:
        config = Config()
        binder = DataclassBinder(config)
        binder.set_scalar("ServerHttp", "Port", "8080")
    """

    def __init__(self, destination: object):
        self.destination = destination
        self.schema = Schema.from_dataclass(type(destination))

    def set_scalar(self, path: str, key: str, value: str) -> None:
        target, slot = self._resolve(path, key, SlotShape.SCALAR)
        setattr(target, slot.attribute, value)

    def append_list_item(self, path: str, key: str, value: str) -> None:
        target, slot = self._resolve(path, key, SlotShape.SEQUENCE)
        items = getattr(target, slot.attribute)
        if items is None:
            items = []
            setattr(target, slot.attribute, items)
        items.append(value)

    def set_map_entry(self, map_name: str, key: str, value: str) -> None:
        slot = self._map_slot(map_name, key, SlotShape.MAP)
        self._container(self.destination, slot.attribute)[key] = value

    def set_submap_entry(self, map_name: str, sub_map_key: str, key: str, value: str) -> None:
        slot = self._map_slot(map_name, key, SlotShape.NESTED_MAP)
        mapping = self._container(self.destination, slot.attribute)
        mapping.setdefault(sub_map_key, {})[key] = value

    def _resolve(self, path: str, key: str, shape: SlotShape) -> tuple[object, Slot]:
        target = self.destination
        schema = self.schema
        if path:
            section_slot = schema.lookup(path)
            if section_slot is None:
                raise BindingError(path, key, shape.value, "destination has no such section")
            if section_slot.shape is not SlotShape.SECTION or section_slot.section is None:
                raise BindingError(
                    path, key, shape.value, f"{path} is a {section_slot.shape.value}, not a section"
                )
            section = getattr(target, section_slot.attribute)
            if section is None:
                section = section_slot.section.type_()
                setattr(target, section_slot.attribute, section)
            target, schema = section, section_slot.section

        slot = schema.lookup(key)
        if slot is None:
            raise BindingError(path, key, shape.value, "destination has no such field")
        if slot.shape is not shape:
            raise BindingError(path, key, shape.value, f"field is a {slot.shape.value}")
        return target, slot

    def _map_slot(self, map_name: str, key: str, shape: SlotShape) -> Slot:
        slot = self.schema.lookup(map_name)
        if slot is None:
            raise BindingError(map_name, key, shape.value, "destination has no such map")
        if slot.shape is not shape:
            raise BindingError(map_name, key, shape.value, f"field is a {slot.shape.value}")
        return slot

    @staticmethod
    def _container(target: object, attribute: str) -> dict:
        mapping = getattr(target, attribute)
        if mapping is None:
            mapping = {}
            setattr(target, attribute, mapping)
        return mapping


class DictBinder:
    """Bind values into plain nested dictionaries.

    Root scalars and lists land at the top level, sections and maps become
    nested dictionaries. A location that already holds a value of another
    shape raises `BindingError`.

    Examples:
        data: dict = {}
        DictBinder(data).set_submap_entry("Press", "ABC", "logo", "smh.png")
        data  # {"Press": {"ABC": {"logo": "smh.png"}}}
    """

    def __init__(self, destination: dict[str, Any] | None = None):
        self.destination: dict[str, Any] = {} if destination is None else destination

    def set_scalar(self, path: str, key: str, value: str) -> None:
        container = self._section(path, key, SlotShape.SCALAR)
        if isinstance(container.get(key), (list, dict)):
            raise BindingError(path, key, SlotShape.SCALAR.value, "location already holds a container")
        container[key] = value

    def append_list_item(self, path: str, key: str, value: str) -> None:
        container = self._section(path, key, SlotShape.SEQUENCE)
        items = container.setdefault(key, [])
        if not isinstance(items, list):
            raise BindingError(path, key, SlotShape.SEQUENCE.value, "location is not a list")
        items.append(value)

    def set_map_entry(self, map_name: str, key: str, value: str) -> None:
        mapping = self._child(self.destination, map_name, map_name, key, SlotShape.MAP)
        if isinstance(mapping.get(key), dict):
            raise BindingError(map_name, key, SlotShape.MAP.value, "entry already holds a sub-map")
        mapping[key] = value

    def set_submap_entry(self, map_name: str, sub_map_key: str, key: str, value: str) -> None:
        mapping = self._child(self.destination, map_name, map_name, key, SlotShape.NESTED_MAP)
        sub_map = self._child(mapping, sub_map_key, map_name, key, SlotShape.NESTED_MAP)
        sub_map[key] = value

    def _section(self, path: str, key: str, shape: SlotShape) -> dict[str, Any]:
        if not path:
            return self.destination
        return self._child(self.destination, path, path, key, shape)

    @staticmethod
    def _child(
        parent: dict[str, Any], name: str, path: str, key: str, shape: SlotShape
    ) -> dict[str, Any]:
        child = parent.setdefault(name, {})
        if not isinstance(child, dict):
            raise BindingError(path, key, shape.value, f"{name} is not a mapping")
        return child


def make_binder(destination: object) -> Binder:
    """Pick the binder for a destination.

    Binders pass through unchanged (even when they are dataclasses), dicts get
    a `DictBinder`, and other dataclass instances get a `DataclassBinder`.

    Raises:
        SchemaError: If the destination is none of those.
    """
    if isinstance(destination, (DataclassBinder, DictBinder)):
        return destination
    if isinstance(destination, dict):
        return DictBinder(destination)
    if isinstance(destination, Binder) and not isinstance(destination, type):
        return destination
    if dataclasses.is_dataclass(destination) and not isinstance(destination, type):
        return DataclassBinder(destination)
    raise SchemaError(
        f"Unsupported destination {type(destination).__name__}: "
        "expected a dataclass instance, a dict, or a Binder"
    )
