"""Run-time data areas: threads, frames, local variables and operand stacks."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from typing import Iterator, Optional

_F32 = struct.Struct(">f")
_I32 = struct.Struct(">i")
_F64 = struct.Struct(">d")
_I64 = struct.Struct(">q")

_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF

DEFAULT_STACK_DEPTH = 1024


class Object:
    """A heap object reference; it carries no state yet."""


@dataclass
class Slot:
    """One cell of a local variable table or operand stack."""

    num: int = 0
    ref: Optional[Object] = None


class StackOverflowError(RuntimeError):
    """Raised when a thread's frame stack exceeds its maximum depth."""


def _to_int32(value: int) -> int:
    value &= _MASK32
    return value - (1 << 32) if value & 0x80000000 else value


def _to_int64(value: int) -> int:
    value &= _MASK64
    return value - (1 << 64) if value & 0x8000000000000000 else value


def _float_to_bits(value: float) -> int:
    try:
        packed = _F32.pack(value)
    except OverflowError:
        packed = _F32.pack(math.copysign(math.inf, value))
    return _I32.unpack(packed)[0]


def _bits_to_float(bits: int) -> float:
    return _F32.unpack(_I32.pack(_to_int32(bits)))[0]


def _double_to_bits(value: float) -> int:
    return _I64.unpack(_F64.pack(value))[0]


def _bits_to_double(bits: int) -> float:
    return _F64.unpack(_I64.pack(_to_int64(bits)))[0]


def _split_long(value: int) -> tuple[int, int]:
    return _to_int32(value), _to_int32(value >> 32)


def _join_long(low: int, high: int) -> int:
    return _to_int64((high & _MASK32) << 32 | (low & _MASK32))


class LocalVars:
    """A method's local variable table; longs and doubles take two slots."""

    def __init__(self, max_locals: int) -> None:
        self._slots = [Slot() for _ in range(max_locals)]

    def __len__(self) -> int:
        return len(self._slots)

    def __getitem__(self, index: int) -> Slot:
        return self._slots[index]

    def __iter__(self) -> Iterator[Slot]:
        return iter(self._slots)

    def set_int(self, index: int, value: int) -> None:
        self._slots[index].num = _to_int32(value)

    def get_int(self, index: int) -> int:
        return self._slots[index].num

    def set_float(self, index: int, value: float) -> None:
        self._slots[index].num = _float_to_bits(value)

    def get_float(self, index: int) -> float:
        return _bits_to_float(self._slots[index].num)

    def set_long(self, index: int, value: int) -> None:
        low, high = _split_long(value)
        self._slots[index].num = low
        self._slots[index + 1].num = high

    def get_long(self, index: int) -> int:
        return _join_long(self._slots[index].num, self._slots[index + 1].num)

    def set_double(self, index: int, value: float) -> None:
        self.set_long(index, _double_to_bits(value))

    def get_double(self, index: int) -> float:
        return _bits_to_double(self.get_long(index))

    def set_ref(self, index: int, ref: Optional[Object]) -> None:
        self._slots[index].ref = ref

    def get_ref(self, index: int) -> Optional[Object]:
        return self._slots[index].ref


class OperandStack:
    """A fixed-capacity operand stack; longs and doubles take two slots."""

    def __init__(self, max_stack: int) -> None:
        self._slots = [Slot() for _ in range(max_stack)]
        self._size = 0

    @property
    def size(self) -> int:
        """Number of slots currently in use."""
        return self._size

    @property
    def capacity(self) -> int:
        return len(self._slots)

    def __len__(self) -> int:
        return self._size

    def _reserve(self, count: int) -> int:
        if self._size + count > len(self._slots):
            raise IndexError("operand stack overflow")
        start = self._size
        self._size += count
        return start

    def _release(self, count: int) -> int:
        if self._size < count:
            raise IndexError("operand stack underflow")
        self._size -= count
        return self._size

    def push_int(self, value: int) -> None:
        self._slots[self._reserve(1)].num = _to_int32(value)

    def pop_int(self) -> int:
        return self._slots[self._release(1)].num

    def push_float(self, value: float) -> None:
        self._slots[self._reserve(1)].num = _float_to_bits(value)

    def pop_float(self) -> float:
        return _bits_to_float(self._slots[self._release(1)].num)

    def push_long(self, value: int) -> None:
        start = self._reserve(2)
        low, high = _split_long(value)
        self._slots[start].num = low
        self._slots[start + 1].num = high

    def pop_long(self) -> int:
        start = self._release(2)
        return _join_long(self._slots[start].num, self._slots[start + 1].num)

    def push_double(self, value: float) -> None:
        self.push_long(_double_to_bits(value))

    def pop_double(self) -> float:
        return _bits_to_double(self.pop_long())

    def push_ref(self, ref: Optional[Object]) -> None:
        self._slots[self._reserve(1)].ref = ref

    def pop_ref(self) -> Optional[Object]:
        slot = self._slots[self._release(1)]
        ref, slot.ref = slot.ref, None
        return ref


class Frame:
    """A method activation: its local variables and operand stack."""

    def __init__(self, max_locals: int, max_stack: int) -> None:
        self.lower: Optional[Frame] = None
        self.local_vars = LocalVars(max_locals)
        self.operand_stack = OperandStack(max_stack)

    def __repr__(self) -> str:
        return (
            f"Frame(max_locals={len(self.local_vars)}, "
            f"max_stack={self.operand_stack.capacity})"
        )


class JvmStack:
    """A linked stack of frames with a maximum depth."""

    def __init__(self, max_size: int) -> None:
        self.max_size = max_size
        self.size = 0
        self._top: Optional[Frame] = None

    def __len__(self) -> int:
        return self.size

    def push(self, frame: Frame) -> None:
        if self.size >= self.max_size:
            raise StackOverflowError("java.lang.StackOverflowError")
        frame.lower = self._top
        self._top = frame
        self.size += 1

    def pop(self) -> Frame:
        top = self.top()
        self._top = top.lower
        top.lower = None
        self.size -= 1
        return top

    def top(self) -> Frame:
        if self._top is None:
            raise IndexError("jvm stack is empty!")
        return self._top


class Thread:
    """A thread of execution with a program counter and a frame stack."""

    def __init__(self, max_depth: int = DEFAULT_STACK_DEPTH) -> None:
        self.pc = 0
        self.stack = JvmStack(max_depth)

    def push_frame(self, frame: Frame) -> None:
        self.stack.push(frame)

    def pop_frame(self) -> Frame:
        return self.stack.pop()

    def current_frame(self) -> Frame:
        return self.stack.top()