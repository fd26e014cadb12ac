"""Command-line entry point: parse options, load a class and describe it."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from typing import Optional, Sequence

from . import classpath
from .class_file import ClassFile, parse
from .constant_pool import ClassFormatError

VERSION_TEXT = "Version 0.0.1"

_BOOL_FLAGS = {"help": "help_flag", "?": "help_flag", "h": "help_flag", "version": "version_flag"}
_STRING_FLAGS = {"classpath": "cp_option", "cp": "cp_option", "Xjre": "xjre_option"}
_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}


class UsageError(ValueError):
    """Raised when the command line cannot be parsed."""


@dataclass
class Cmd:
    """Options and arguments taken from the command line."""

    help_flag: bool = False
    version_flag: bool = False
    cp_option: str = ""
    xjre_option: str = ""
    class_name: str = ""
    args: list[str] = field(default_factory=list)


def _parse_bool(name: str, value: str) -> bool:
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise UsageError(f"invalid boolean value {value!r} for -{name}")


def parse_cmd(argv: Sequence[str]) -> Cmd:
    """Parse options up to the first non-option; the rest are class and arguments."""
    cmd = Cmd()
    rest = list(argv)
    while rest:
        arg = rest[0]
        if len(arg) < 2 or not arg.startswith("-"):
            break
        rest.pop(0)
        if arg == "--":
            break
        name = arg[2:] if arg.startswith("--") else arg[1:]
        if not name or name[0] in "-=":
            raise UsageError(f"bad flag syntax: {arg}")
        name, has_value, value = name.partition("=")
        if name in _BOOL_FLAGS:
            setattr(cmd, _BOOL_FLAGS[name], _parse_bool(name, value) if has_value else True)
        elif name in _STRING_FLAGS:
            if not has_value:
                if not rest:
                    raise UsageError(f"flag needs an argument: -{name}")
                value = rest.pop(0)
            setattr(cmd, _STRING_FLAGS[name], value)
        else:
            raise UsageError(f"flag provided but not defined: -{name}")
    if rest:
        cmd.class_name, cmd.args = rest[0], rest[1:]
    return cmd


def usage(prog: str) -> str:
    """The one-line usage message."""
    return f"Usage: {prog} [-options] class [args...]"


def format_class_info(cf: ClassFile) -> str:
    """Describe the version, names, fields and methods of a parsed class."""
    lines = [
        f"version: {cf.major_version}.{cf.minor_version}",
        f"constants count: {len(cf.constant_pool)}",
        f"access flags: 0x{cf.access_flags:x}",
        f"this class: {cf.class_name()}",
        f"super class: {cf.super_class_name()}",
        f"interfaces: [{' '.join(cf.interface_names())}]",
        f"fields count: {len(cf.fields)}",
        *(f"  {member.name()}" for member in cf.fields),
        f"methods count: {len(cf.methods)}",
        *(f"  {member.name()}" for member in cf.methods),
    ]
    return "\n".join(lines)


def start_jvm(cmd: Cmd) -> int:
    """Find the main class on the classpath and print what it contains."""
    try:
        cp = classpath.parse(cmd.xjre_option, cmd.cp_option)
    except FileNotFoundError as exc:
        print(exc, file=sys.stderr)
        return 1
    try:
        class_data, _ = cp.read_class(cmd.class_name.replace(".", "/"))
    except classpath.ClassNotFoundError:
        print(f"Could not find or load main class {cmd.class_name}")
        return 1
    try:
        cf = parse(class_data)
    except ClassFormatError as exc:
        print(exc, file=sys.stderr)
        return 1
    print(cmd.class_name)
    print(format_class_info(cf))
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    prog = sys.argv[0] if sys.argv and sys.argv[0] else "jvmlite"
    prog = os.path.basename(prog)
    if argv is None:
        argv = sys.argv[1:]
    try:
        cmd = parse_cmd(argv)
    except UsageError as exc:
        print(exc, file=sys.stderr)
        print(usage(prog))
        return 2
    if cmd.version_flag:
        print(VERSION_TEXT)
        return 0
    if cmd.help_flag or not cmd.class_name:
        print(usage(prog))
        return 0
    return start_jvm(cmd)