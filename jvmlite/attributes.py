"""Attributes attached to classes, fields, methods and Code attributes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from .class_reader import ClassReader
from .constant_pool import ConstantPool


class AttributeInfo(ABC):
    """Base of every attribute kind."""

    @classmethod
    @abstractmethod
    def _read(cls, reader: ClassReader, pool: ConstantPool, name: str, length: int) -> AttributeInfo:
        """Read the attribute body that follows the name index and length."""


@dataclass(frozen=True)
class ExceptionTableEntry:
    """One handler range of a Code attribute."""

    start_pc: int
    end_pc: int
    handler_pc: int
    catch_type: int


@dataclass
class CodeAttribute(AttributeInfo):
    """Bytecode of a method with its limits, handlers and nested attributes."""

    pool: ConstantPool = field(repr=False, compare=False)
    max_stack: int
    max_locals: int
    code: bytes
    exception_table: list[ExceptionTableEntry]
    attributes: list[AttributeInfo]

    @classmethod
    def _read(cls, reader, pool, name, length):
        max_stack = reader.read_u16()
        max_locals = reader.read_u16()
        code = reader.read_bytes(reader.read_u32())
        table = [
            ExceptionTableEntry(
                reader.read_u16(), reader.read_u16(), reader.read_u16(), reader.read_u16()
            )
            for _ in range(reader.read_u16())
        ]
        attributes = read_attributes(reader, pool)
        return cls(pool, max_stack, max_locals, code, table, attributes)


@dataclass(frozen=True)
class ConstantValueAttribute(AttributeInfo):
    """Index of the constant that initialises a static field."""

    constant_value_index: int

    @classmethod
    def _read(cls, reader, pool, name, length):
        return cls(reader.read_u16())


@dataclass(frozen=True)
class _MarkerAttribute(AttributeInfo):
    """An attribute whose presence is its only information."""

    @classmethod
    def _read(cls, reader, pool, name, length):
        return cls()


@dataclass(frozen=True)
class DeprecatedAttribute(_MarkerAttribute):
    """Marks a class, field or method as deprecated."""


@dataclass(frozen=True)
class SyntheticAttribute(_MarkerAttribute):
    """Marks a member that does not appear in the source code."""


@dataclass(frozen=True)
class ExceptionsAttribute(AttributeInfo):
    """Constant pool indices of the checked exceptions a method declares."""

    exception_index_table: list[int]

    @classmethod
    def _read(cls, reader, pool, name, length):
        return cls(reader.read_u16_list())


@dataclass(frozen=True)
class LineNumberTableEntry:
    start_pc: int
    line_number: int


@dataclass(frozen=True)
class LineNumberTableAttribute(AttributeInfo):
    """Mapping from bytecode offsets to source lines."""

    line_number_table: list[LineNumberTableEntry]

    def line_number(self, pc: int) -> int:
        """Source line covering ``pc``, or -1 if none does."""
        for entry in reversed(self.line_number_table):
            if pc >= entry.start_pc:
                return entry.line_number
        return -1

    @classmethod
    def _read(cls, reader, pool, name, length):
        return cls(
            [
                LineNumberTableEntry(reader.read_u16(), reader.read_u16())
                for _ in range(reader.read_u16())
            ]
        )


@dataclass(frozen=True)
class LocalVariableTableEntry:
    start_pc: int
    length: int
    name_index: int
    descriptor_index: int
    index: int


@dataclass(frozen=True)
class LocalVariableTableAttribute(AttributeInfo):
    local_variable_table: list[LocalVariableTableEntry]

    @classmethod
    def _read(cls, reader, pool, name, length):
        return cls(
            [
                LocalVariableTableEntry(*(reader.read_u16() for _ in range(5)))
                for _ in range(reader.read_u16())
            ]
        )


@dataclass(frozen=True)
class LocalVariableTypeTableEntry:
    start_pc: int
    length: int
    name_index: int
    signature_index: int
    index: int


@dataclass(frozen=True)
class LocalVariableTypeTableAttribute(AttributeInfo):
    local_variable_type_table: list[LocalVariableTypeTableEntry]

    @classmethod
    def _read(cls, reader, pool, name, length):
        return cls(
            [
                LocalVariableTypeTableEntry(*(reader.read_u16() for _ in range(5)))
                for _ in range(reader.read_u16())
            ]
        )


@dataclass
class SourceFileAttribute(AttributeInfo):
    """Name of the source file a class was compiled from."""

    pool: ConstantPool = field(repr=False, compare=False)
    source_file_index: int

    def file_name(self) -> str:
        return self.pool.get_utf8(self.source_file_index)

    @classmethod
    def _read(cls, reader, pool, name, length):
        return cls(pool, reader.read_u16())


@dataclass
class SignatureAttribute(AttributeInfo):
    """Generic signature of a class, field or method."""

    pool: ConstantPool = field(repr=False, compare=False)
    signature_index: int

    def signature(self) -> str:
        return self.pool.get_utf8(self.signature_index)

    @classmethod
    def _read(cls, reader, pool, name, length):
        return cls(pool, reader.read_u16())


@dataclass
class EnclosingMethodAttribute(AttributeInfo):
    """Class and method that enclose a local or anonymous class."""

    pool: ConstantPool = field(repr=False, compare=False)
    class_index: int
    method_index: int

    def class_name(self) -> str:
        return self.pool.get_class_name(self.class_index)

    def method_name_and_descriptor(self) -> tuple[str, str]:
        """Name and descriptor of the enclosing method, or two empty strings."""
        if self.method_index > 0:
            return self.pool.get_name_and_type(self.method_index)
        return "", ""

    @classmethod
    def _read(cls, reader, pool, name, length):
        class_index = reader.read_u16()
        return cls(pool, class_index, reader.read_u16())


@dataclass(frozen=True)
class InnerClassInfo:
    inner_class_info_index: int
    outer_class_info_index: int
    inner_name_index: int
    inner_class_access_flags: int


@dataclass(frozen=True)
class InnerClassesAttribute(AttributeInfo):
    classes: list[InnerClassInfo]

    @classmethod
    def _read(cls, reader, pool, name, length):
        return cls(
            [
                InnerClassInfo(*(reader.read_u16() for _ in range(4)))
                for _ in range(reader.read_u16())
            ]
        )


@dataclass(frozen=True)
class BootstrapMethod:
    bootstrap_method_ref: int
    bootstrap_arguments: list[int]


@dataclass(frozen=True)
class BootstrapMethodsAttribute(AttributeInfo):
    bootstrap_methods: list[BootstrapMethod]

    @classmethod
    def _read(cls, reader, pool, name, length):
        methods = []
        for _ in range(reader.read_u16()):
            ref = reader.read_u16()
            methods.append(BootstrapMethod(ref, reader.read_u16_list()))
        return cls(methods)


@dataclass(frozen=True)
class UnparsedAttribute(AttributeInfo):
    """An attribute kept as raw bytes."""

    name: str
    length: int
    info: bytes

    @classmethod
    def _read(cls, reader, pool, name, length):
        return cls(name, length, reader.read_bytes(length))


_ATTRIBUTE_TYPES: dict[str, type[AttributeInfo]] = {
    "Code": CodeAttribute,
    "ConstantValue": ConstantValueAttribute,
    "Deprecated": DeprecatedAttribute,
    "Exceptions": ExceptionsAttribute,
    "LineNumberTable": LineNumberTableAttribute,
    "LocalVariableTable": LocalVariableTableAttribute,
    "SourceFile": SourceFileAttribute,
    "Synthetic": SyntheticAttribute,
}


def read_attribute(reader: ClassReader, pool: ConstantPool) -> AttributeInfo:
    """Read one attribute; unrecognised names are kept unparsed."""
    name = pool.get_utf8(reader.read_u16())
    length = reader.read_u32()
    kind = _ATTRIBUTE_TYPES.get(name, UnparsedAttribute)
    return kind._read(reader, pool, name, length)


def read_attributes(reader: ClassReader, pool: ConstantPool) -> list[AttributeInfo]:
    """Read a u2 count followed by that many attributes."""
    return [read_attribute(reader, pool) for _ in range(reader.read_u16())]