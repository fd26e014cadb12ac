"""Class path search, class file parsing and runtime data areas for a small JVM."""

__version__ = "0.1.0"
__all__ = [
    "attributes",
    "class_file",
    "class_reader",
    "classpath",
    "cli",
    "constant_pool",
    "rtda",
]