import struct

import pytest

from jvmlite.attributes import (
    BootstrapMethod,
    BootstrapMethodsAttribute,
    CodeAttribute,
    ConstantValueAttribute,
    DeprecatedAttribute,
    EnclosingMethodAttribute,
    ExceptionsAttribute,
    ExceptionTableEntry,
    InnerClassesAttribute,
    InnerClassInfo,
    LineNumberTableAttribute,
    LineNumberTableEntry,
    LocalVariableTableAttribute,
    LocalVariableTableEntry,
    LocalVariableTypeTableAttribute,
    LocalVariableTypeTableEntry,
    SignatureAttribute,
    SourceFileAttribute,
    SyntheticAttribute,
    UnparsedAttribute,
    read_attribute,
    read_attributes,
)
from jvmlite.class_reader import ClassReader
from jvmlite.constant_pool import ClassFormatError, read_constant_pool


def _utf8(text):
    raw = text.encode("utf-8")
    return struct.pack(">BH", 1, len(raw)) + raw


def _class(index):
    return struct.pack(">BH", 7, index)


def _nat(name_index, descriptor_index):
    return struct.pack(">BHH", 12, name_index, descriptor_index)


_ENTRIES = [
    _utf8("Code"),  # 1
    _utf8("ConstantValue"),  # 2
    _utf8("Deprecated"),  # 3
    _utf8("Exceptions"),  # 4
    _utf8("LineNumberTable"),  # 5
    _utf8("LocalVariableTable"),  # 6
    _utf8("SourceFile"),  # 7
    _utf8("Synthetic"),  # 8
    _utf8("Foo.java"),  # 9
    _utf8("Custom"),  # 10
    _class(12),  # 11
    _utf8("pkg/Outer"),  # 12
    _nat(14, 15),  # 13
    _utf8("run"),  # 14
    _utf8("()V"),  # 15
    _utf8("Ljava/util/List<TT;>;"),  # 16
    _utf8("Signature"),  # 17
]


@pytest.fixture
def pool():
    data = struct.pack(">H", len(_ENTRIES) + 1) + b"".join(_ENTRIES)
    return read_constant_pool(ClassReader(data))


def _attr(name_index, body):
    return struct.pack(">HI", name_index, len(body)) + body


def test_code_attribute(pool):
    inner = _attr(5, struct.pack(">HHH", 1, 0, 7))
    body = (
        struct.pack(">HHI", 2, 3, 4)
        + b"\x2a\xb7\x00\x01"
        + struct.pack(">HHHHH", 1, 0, 4, 4, 11)
        + struct.pack(">H", 1)
        + inner
    )
    reader = ClassReader(_attr(1, body) + b"\xff")
    attr = read_attribute(reader, pool)
    assert isinstance(attr, CodeAttribute)
    assert attr.max_stack == 2
    assert attr.max_locals == 3
    assert attr.code == b"\x2a\xb7\x00\x01"
    assert attr.exception_table == [ExceptionTableEntry(0, 4, 4, 11)]
    assert len(attr.attributes) == 1
    assert attr.attributes[0].line_number(0) == 7
    assert reader.remaining == 1


def test_constant_value(pool):
    attr = read_attribute(ClassReader(_attr(2, struct.pack(">H", 5))), pool)
    assert attr == ConstantValueAttribute(5)


def test_markers_via_read_attributes(pool):
    reader = ClassReader(struct.pack(">H", 2) + _attr(3, b"") + _attr(8, b""))
    attrs = read_attributes(reader, pool)
    assert [type(a) for a in attrs] == [DeprecatedAttribute, SyntheticAttribute]
    assert reader.remaining == 0


def test_exceptions(pool):
    body = struct.pack(">HHH", 2, 11, 12)
    attr = read_attribute(ClassReader(_attr(4, body)), pool)
    assert isinstance(attr, ExceptionsAttribute)
    assert attr.exception_index_table == [11, 12]


def test_line_number_lookup():
    table = LineNumberTableAttribute(
        [LineNumberTableEntry(0, 10), LineNumberTableEntry(5, 12), LineNumberTableEntry(9, 15)]
    )
    assert table.line_number(0) == 10
    assert table.line_number(6) == 12
    assert table.line_number(100) == 15


def test_line_number_missing():
    assert LineNumberTableAttribute([]).line_number(0) == -1
    assert LineNumberTableAttribute([LineNumberTableEntry(3, 8)]).line_number(1) == -1


def test_local_variable_table(pool):
    body = struct.pack(">HHHHHH", 1, 0, 10, 14, 15, 2)
    attr = read_attribute(ClassReader(_attr(6, body)), pool)
    assert isinstance(attr, LocalVariableTableAttribute)
    assert attr.local_variable_table == [LocalVariableTableEntry(0, 10, 14, 15, 2)]


def test_source_file(pool):
    attr = read_attribute(ClassReader(_attr(7, struct.pack(">H", 9))), pool)
    assert isinstance(attr, SourceFileAttribute)
    assert attr.file_name() == "Foo.java"


def test_unknown_attribute_is_unparsed(pool):
    attr = read_attribute(ClassReader(_attr(10, b"\x01\x02\x03")), pool)
    assert attr == UnparsedAttribute("Custom", 3, b"\x01\x02\x03")


def test_signature_name_is_kept_unparsed(pool):
    attr = read_attribute(ClassReader(_attr(17, struct.pack(">H", 16))), pool)
    assert isinstance(attr, UnparsedAttribute)
    assert attr.name == "Signature"
    assert attr.info == struct.pack(">H", 16)


def test_signature_attribute(pool):
    assert SignatureAttribute(pool, 16).signature() == "Ljava/util/List<TT;>;"


def test_enclosing_method(pool):
    attr = EnclosingMethodAttribute._read(
        ClassReader(struct.pack(">HH", 11, 13)), pool, "EnclosingMethod", 4
    )
    assert attr.class_name() == "pkg/Outer"
    assert attr.method_name_and_descriptor() == ("run", "()V")


def test_enclosing_method_without_method(pool):
    attr = EnclosingMethodAttribute(pool, 11, 0)
    assert attr.method_name_and_descriptor() == ("", "")


def test_inner_classes(pool):
    data = struct.pack(">HHHHH", 1, 11, 0, 0, 9)
    attr = InnerClassesAttribute._read(ClassReader(data), pool, "InnerClasses", len(data))
    assert attr.classes == [InnerClassInfo(11, 0, 0, 9)]


def test_bootstrap_methods(pool):
    data = struct.pack(">HHHHH", 1, 3, 2, 5, 6)
    attr = BootstrapMethodsAttribute._read(ClassReader(data), pool, "BootstrapMethods", len(data))
    assert attr.bootstrap_methods == [BootstrapMethod(3, [5, 6])]


def test_local_variable_type_table(pool):
    data = struct.pack(">HHHHHH", 1, 0, 10, 14, 16, 1)
    attr = LocalVariableTypeTableAttribute._read(
        ClassReader(data), pool, "LocalVariableTypeTable", len(data)
    )
    assert attr.local_variable_type_table == [LocalVariableTypeTableEntry(0, 10, 14, 16, 1)]


def test_name_index_must_be_utf8(pool):
    with pytest.raises(ClassFormatError):
        read_attribute(ClassReader(_attr(11, b"")), pool)


def test_truncated_body(pool):
    with pytest.raises(EOFError):
        read_attribute(ClassReader(_attr(2, b"\x00")), pool)