"""Parsing a whole class file into its structure."""

from __future__ import annotations

from dataclasses import dataclass, field

from .attributes import AttributeInfo, read_attributes
from .class_reader import ClassReader
from .constant_pool import ClassFormatError, ConstantPool, read_constant_pool

_MAGIC = 0xCAFEBABE


class UnsupportedClassVersionError(ClassFormatError):
    """Raised when a class file's version is not supported."""


@dataclass
class MemberInfo:
    """A field or method of a class."""

    pool: ConstantPool = field(repr=False, compare=False)
    access_flags: int
    name_index: int
    descriptor_index: int
    attributes: list[AttributeInfo]

    def name(self) -> str:
        return self.pool.get_utf8(self.name_index)

    def descriptor(self) -> str:
        return self.pool.get_utf8(self.descriptor_index)


def _read_member(reader: ClassReader, pool: ConstantPool) -> MemberInfo:
    access_flags = reader.read_u16()
    name_index = reader.read_u16()
    descriptor_index = reader.read_u16()
    return MemberInfo(pool, access_flags, name_index, descriptor_index, read_attributes(reader, pool))


def read_members(reader: ClassReader, pool: ConstantPool) -> list[MemberInfo]:
    """Read a u2 count followed by that many fields or methods."""
    return [_read_member(reader, pool) for _ in range(reader.read_u16())]


@dataclass
class ClassFile:
    """The parsed contents of a class file."""

    minor_version: int
    major_version: int
    constant_pool: ConstantPool
    access_flags: int
    this_class: int
    super_class: int
    interfaces: list[int]
    fields: list[MemberInfo]
    methods: list[MemberInfo]
    attributes: list[AttributeInfo]

    def class_name(self) -> str:
        return self.constant_pool.get_class_name(self.this_class)

    def super_class_name(self) -> str:
        """Name of the superclass, or "" when there is none."""
        if self.super_class > 0:
            return self.constant_pool.get_class_name(self.super_class)
        return ""

    def interface_names(self) -> list[str]:
        return [self.constant_pool.get_class_name(index) for index in self.interfaces]


def _check_version(minor: int, major: int) -> None:
    if major == 45:
        return
    if 46 <= major <= 52 and minor == 0:
        return
    raise UnsupportedClassVersionError("java.lang.UnsupportedClassVersionError!")


def _read_class_file(reader: ClassReader) -> ClassFile:
    if reader.read_u32() != _MAGIC:
        raise ClassFormatError("java.lang.ClassFormatError: magic!")
    minor = reader.read_u16()
    major = reader.read_u16()
    _check_version(minor, major)
    pool = read_constant_pool(reader)
    access_flags = reader.read_u16()
    this_class = reader.read_u16()
    super_class = reader.read_u16()
    interfaces = reader.read_u16_list()
    fields = read_members(reader, pool)
    methods = read_members(reader, pool)
    attributes = read_attributes(reader, pool)
    return ClassFile(
        minor, major, pool, access_flags, this_class, super_class,
        interfaces, fields, methods, attributes,
    )


def parse(class_data: bytes) -> ClassFile:
    """Parse class file bytes, raising ClassFormatError on malformed data."""
    try:
        return _read_class_file(ClassReader(class_data))
    except EOFError as exc:
        raise ClassFormatError(str(exc)) from exc