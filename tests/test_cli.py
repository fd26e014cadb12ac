import struct

import pytest

from jvmlite.class_file import parse
from jvmlite.cli import Cmd, UsageError, format_class_info, main, parse_cmd, usage


def _utf8(text):
    raw = text.encode()
    return struct.pack(">BH", 1, len(raw)) + raw


def _class_ref(name_index):
    return struct.pack(">BH", 7, name_index)


def build_class(this_name="Hello"):
    pool = [
        _utf8(this_name),
        _class_ref(1),
        _utf8("java/lang/Object"),
        _class_ref(3),
        _utf8("main"),
        _utf8("([Ljava/lang/String;)V"),
        _utf8("count"),
        _utf8("I"),
    ]
    data = struct.pack(">IHHH", 0xCAFEBABE, 0, 52, len(pool) + 1)
    data += b"".join(pool)
    data += struct.pack(">HHHH", 0x21, 2, 4, 0)
    data += struct.pack(">H", 1) + struct.pack(">HHHH", 0x0002, 7, 8, 0)
    data += struct.pack(">H", 1) + struct.pack(">HHHH", 0x0009, 5, 6, 0)
    data += struct.pack(">H", 0)
    return data


@pytest.fixture
def workspace(tmp_path):
    jre = tmp_path / "jre"
    (jre / "lib").mkdir(parents=True)
    classes = tmp_path / "classes"
    classes.mkdir()
    (classes / "Hello.class").write_bytes(build_class())
    return jre, classes


def test_parse_cmd_class_and_args():
    cmd = parse_cmd(["-cp", "a", "-Xjre", "j", "Main", "x", "-y"])
    assert cmd == Cmd(cp_option="a", xjre_option="j", class_name="Main", args=["x", "-y"])


def test_parse_cmd_flag_forms():
    cmd = parse_cmd(["--classpath=lib", "-version", "-help=false"])
    assert cmd.cp_option == "lib"
    assert cmd.version_flag is True
    assert cmd.help_flag is False
    assert cmd.class_name == ""
    assert cmd.args == []


def test_parse_cmd_question_mark_and_terminator():
    cmd = parse_cmd(["-?", "--", "-notaflag", "arg"])
    assert cmd.help_flag is True
    assert cmd.class_name == "-notaflag"
    assert cmd.args == ["arg"]


@pytest.mark.parametrize(
    "argv",
    [["-bogus"], ["-cp"], ["-help=maybe"], ["---x"], ["-=x"]],
)
def test_parse_cmd_errors(argv):
    with pytest.raises(UsageError):
        parse_cmd(argv)


def test_usage_text():
    assert usage("java") == "Usage: java [-options] class [args...]"


def test_main_version(capsys):
    assert main(["-version"]) == 0
    assert capsys.readouterr().out.strip() == "Version 0.0.1"


def test_main_without_class_prints_usage(capsys):
    assert main([]) == 0
    assert "[-options] class [args...]" in capsys.readouterr().out


def test_main_unknown_flag(capsys):
    assert main(["-bogus"]) == 2
    captured = capsys.readouterr()
    assert "flag provided but not defined: -bogus" in captured.err
    assert "Usage:" in captured.out


def test_format_class_info():
    text = format_class_info(parse(build_class()))
    assert text.splitlines() == [
        "version: 52.0",
        "constants count: 9",
        "access flags: 0x21",
        "this class: Hello",
        "super class: java/lang/Object",
        "interfaces: []",
        "fields count: 1",
        "  count",
        "methods count: 1",
        "  main",
    ]


def test_main_loads_class(workspace, capsys):
    jre, classes = workspace
    code = main(["-Xjre", str(jre), "-cp", str(classes), "Hello", "arg"])
    out = capsys.readouterr().out.splitlines()
    assert code == 0
    assert out[0] == "Hello"
    assert "this class: Hello" in out
    assert "  main" in out


def test_main_dotted_class_name(tmp_path, capsys):
    jre = tmp_path / "jre"
    (jre / "lib").mkdir(parents=True)
    pkg = tmp_path / "cp" / "pkg"
    pkg.mkdir(parents=True)
    (pkg / "Hello.class").write_bytes(build_class("pkg/Hello"))
    code = main(["-Xjre", str(jre), "-cp", str(tmp_path / "cp"), "pkg.Hello"])
    out = capsys.readouterr().out.splitlines()
    assert code == 0
    assert out[0] == "pkg.Hello"
    assert "this class: pkg/Hello" in out


def test_main_missing_class(workspace, capsys):
    jre, classes = workspace
    code = main(["-Xjre", str(jre), "-cp", str(classes), "Missing"])
    assert code == 1
    assert capsys.readouterr().out.strip() == "Could not find or load main class Missing"


def test_main_malformed_class(workspace, capsys):
    jre, classes = workspace
    (classes / "Broken.class").write_bytes(b"\x00\x01\x02\x03")
    code = main(["-Xjre", str(jre), "-cp", str(classes), "Broken"])
    assert code == 1
    assert "magic" in capsys.readouterr().err