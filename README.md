# jvmlite

jvmlite holds the first pieces of a Java virtual machine:

- **Class path search** (`jvmlite.classpath`) finds `.class` files in the
  jars directly inside the JRE's `lib` and `lib/ext` directories, and then on
  the user class path. A user class path entry can be a directory, a jar or
  zip archive (`.jar`, `.JAR`, `.zip`, `.ZIP`), a wildcard (`dir/*`, every jar
  directly inside `dir`), or several of these joined by the platform's path
  list separator (`os.pathsep`).
- **Class file parsing** (`jvmlite.class_file`, `jvmlite.constant_pool`,
  `jvmlite.attributes`, `jvmlite.class_reader`) reads the magic number, the
  version, the constant pool (with modified UTF-8 strings), the access flags,
  this class, the super class, the interfaces, and the fields, methods and
  attributes.
- **Runtime data areas** (`jvmlite.rtda`) provide threads, frame stacks,
  frames, local variable tables and operand stacks. These store ints, floats,
  longs, doubles and references in 32-bit slots.

## Installation

```
pip install .
```

## Command line

```
jvmlite [-options] class [args...]
```

Options can be written with one or two leading dashes. A value can follow
`=` or come as the next argument.

- `-help`, `-h`, `-?`: print the usage line
- `-version`: print `Version 0.0.1`
- `-classpath PATH`, `-cp PATH`: the user class path (defaults to `.`)
- `-Xjre PATH`: the JRE directory

Option parsing stops at the first argument that is not an option, or at `--`.

### Finding the JRE

If the `-Xjre` path exists, it is used. Otherwise `./jre` is used if it
exists. Otherwise `$JAVA_HOME/jre` is used. If none of these applies, the
command reports an error and exits with status 1.

### What the command prints

The command loads the named class; dots in the name become slashes. It
prints the class name, followed by:

- the version
- the constant pool count
- the access flags
- this class, the super class and the interfaces
- the field names and the method names

If the class cannot be found, the command prints
`Could not find or load main class NAME` and exits with status 1. A malformed
class file also gives exit status 1. An unknown option or a missing option
value prints an error and the usage line, and gives exit status 2.

Example:

```
jvmlite -Xjre /opt/java/jre -cp build/classes com.example.Hello
```

## Library use

### Reading and parsing a class

```python
from jvmlite import classpath, class_file

cp = classpath.parse("/opt/java/jre", "build/classes")
data, entry = cp.read_class("com/example/Hello")
cf = class_file.parse(data)
print(cf.class_name(), cf.super_class_name(), cf.interface_names())
for method in cf.methods:
    print(method.name(), method.descriptor())
```

### Errors

| Condition | Exception |
|---|---|
| A class that cannot be found | `classpath.ClassNotFoundError` |
| No JRE directory | `FileNotFoundError` (raised by `classpath.parse`) |
| Malformed class data | `constant_pool.ClassFormatError` |
| A version outside 45.x and 46.0–52.0 | `class_file.UnsupportedClassVersionError` |

### Classpath entries and attributes

`classpath.new_entry(path)` builds one entry from a path.

`classpath.CachedZipEntry` keeps its archive open between lookups. It can be
used as a context manager, or closed with `close()`.

Parsed attributes include:

- `CodeAttribute`
- `ConstantValueAttribute`
- `ExceptionsAttribute`
- `LineNumberTableAttribute`, with `line_number(pc)`
- `LocalVariableTableAttribute`
- `SourceFileAttribute`
- `DeprecatedAttribute`
- `SyntheticAttribute`

Other attribute names are kept as `UnparsedAttribute` with their raw bytes.

### Working with a frame

```python
from jvmlite.rtda import Frame, Thread

frame = Frame(100, 100)
frame.local_vars.set_long(2, 2997924580)
frame.operand_stack.push_double(2.71828182845)
print(frame.local_vars.get_long(2), frame.operand_stack.pop_double())

thread = Thread()
thread.push_frame(frame)
assert thread.current_frame() is frame
```

`Thread` holds at most 1024 frames by default. Pushing one more raises
`rtda.StackOverflowError`. Popping from an empty stack raises `IndexError`,
and so does overflowing or underflowing an operand stack.

## What it does not do

jvmlite does not execute bytecode. The command describes a class but does not
run its `main` method, and the arguments after the class name are ignored.
The runtime data areas have no instruction interpreter, and `rtda.Object`
carries no state.

## Running the tests

```
pip install .[test]
pytest
```