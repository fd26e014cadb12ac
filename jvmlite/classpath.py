"""Locating class files on a classpath of directories, jar and zip archives."""

from __future__ import annotations

import os
import zipfile
from abc import ABC, abstractmethod
from dataclasses import dataclass

PATH_LIST_SEPARATOR = os.pathsep

_ARCHIVE_SUFFIXES = (".jar", ".JAR", ".zip", ".ZIP")
_JAR_SUFFIXES = (".jar", ".JAR")


class ClassNotFoundError(LookupError):
    """Raised when a class file cannot be found or read from a classpath entry."""


class Entry(ABC):
    """One element of a classpath."""

    @abstractmethod
    def read_class(self, class_name: str) -> tuple[bytes, Entry]:
        """Return the bytes of ``class_name`` and the entry that supplied them."""

    @abstractmethod
    def __str__(self) -> str: ...


class DirEntry(Entry):
    """A directory holding class files laid out by package."""

    def __init__(self, path: str) -> None:
        self.abs_dir = os.path.abspath(path)

    def read_class(self, class_name: str) -> tuple[bytes, Entry]:
        file_name = os.path.join(self.abs_dir, class_name)
        try:
            with open(file_name, "rb") as fh:
                return fh.read(), self
        except OSError as exc:
            raise ClassNotFoundError(f"class not found: {class_name}") from exc

    def __str__(self) -> str:
        return self.abs_dir

    def __repr__(self) -> str:
        return f"DirEntry({self.abs_dir!r})"


def _find_member(archive: zipfile.ZipFile, class_name: str) -> zipfile.ZipInfo | None:
    return next((info for info in archive.infolist() if info.filename == class_name), None)


class ZipEntry(Entry):
    """A jar or zip archive, reopened on every lookup."""

    def __init__(self, path: str) -> None:
        self.abs_path = os.path.abspath(path)

    def read_class(self, class_name: str) -> tuple[bytes, Entry]:
        try:
            with zipfile.ZipFile(self.abs_path) as archive:
                info = _find_member(archive, class_name)
                if info is not None:
                    return archive.read(info), self
        except (OSError, zipfile.BadZipFile) as exc:
            raise ClassNotFoundError(f"class not found: {class_name}") from exc
        raise ClassNotFoundError(f"class not found: {class_name}")

    def __str__(self) -> str:
        return self.abs_path

    def __repr__(self) -> str:
        return f"ZipEntry({self.abs_path!r})"


class CachedZipEntry(Entry):
    """A jar or zip archive kept open between lookups until closed."""

    def __init__(self, path: str) -> None:
        self.abs_path = os.path.abspath(path)
        self._archive: zipfile.ZipFile | None = None

    def _open(self) -> zipfile.ZipFile:
        if self._archive is None:
            try:
                self._archive = zipfile.ZipFile(self.abs_path)
            except (OSError, zipfile.BadZipFile) as exc:
                raise ClassNotFoundError(f"cannot open archive: {self.abs_path}") from exc
        return self._archive

    def read_class(self, class_name: str) -> tuple[bytes, Entry]:
        archive = self._open()
        info = _find_member(archive, class_name)
        if info is None:
            raise ClassNotFoundError(f"class not found: {class_name}")
        try:
            return archive.read(info), self
        except (OSError, zipfile.BadZipFile) as exc:
            raise ClassNotFoundError(f"class not found: {class_name}") from exc

    @property
    def is_open(self) -> bool:
        return self._archive is not None

    def close(self) -> None:
        """Close the underlying archive if it is open."""
        if self._archive is not None:
            self._archive.close()
            self._archive = None

    def __enter__(self) -> CachedZipEntry:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __str__(self) -> str:
        return self.abs_path

    def __repr__(self) -> str:
        return f"CachedZipEntry({self.abs_path!r})"


class CompositeEntry(Entry):
    """An ordered group of entries searched front to back."""

    def __init__(self, entries: list[Entry] | None = None) -> None:
        self.entries: list[Entry] = list(entries or [])

    def read_class(self, class_name: str) -> tuple[bytes, Entry]:
        for entry in self.entries:
            try:
                return entry.read_class(class_name)
            except ClassNotFoundError:
                continue
        raise ClassNotFoundError(f"class not found: {class_name}")

    def __iter__(self):
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __str__(self) -> str:
        return PATH_LIST_SEPARATOR.join(str(entry) for entry in self.entries)

    def __repr__(self) -> str:
        return f"CompositeEntry({self.entries!r})"


def new_entry(path: str) -> Entry:
    """Build the kind of entry that ``path`` describes."""
    if PATH_LIST_SEPARATOR in path:
        return composite_entry(path)
    if path.endswith("*"):
        return wildcard_entry(path)
    if path.endswith(_ARCHIVE_SUFFIXES):
        return ZipEntry(path)
    return DirEntry(path)


def composite_entry(path_list: str) -> CompositeEntry:
    """Build a composite entry from a separator-joined list of paths."""
    return CompositeEntry([new_entry(path) for path in path_list.split(PATH_LIST_SEPARATOR)])


def wildcard_entry(path: str) -> CompositeEntry:
    """Collect every jar directly inside the directory named by ``dir/*``."""
    base_dir = path[:-1]
    try:
        with os.scandir(base_dir) as it:
            children = sorted(it, key=lambda e: e.name)
    except OSError:
        return CompositeEntry()
    jars: list[Entry] = [
        ZipEntry(os.path.join(base_dir, child.name))
        for child in children
        if not child.is_dir(follow_symlinks=False) and child.name.endswith(_JAR_SUFFIXES)
    ]
    return CompositeEntry(jars)


def find_jre_dir(jre_option: str) -> str:
    """Find the JRE directory from the option, ./jre, or JAVA_HOME."""
    if jre_option and os.path.exists(jre_option):
        return jre_option
    if os.path.exists("./jre"):
        return "./jre"
    java_home = os.environ.get("JAVA_HOME", "")
    if java_home:
        return os.path.join(java_home, "jre")
    raise FileNotFoundError("Can not find jre folder!")


@dataclass
class Classpath:
    """Boot, extension and user classpaths searched in that order."""

    boot: Entry
    ext: Entry
    user: Entry

    def read_class(self, class_name: str) -> tuple[bytes, Entry]:
        """Read ``class_name`` (slash-separated, without suffix)."""
        file_name = class_name + ".class"
        for entry in (self.boot, self.ext):
            try:
                return entry.read_class(file_name)
            except ClassNotFoundError:
                continue
        return self.user.read_class(file_name)

    def __str__(self) -> str:
        return str(self.user)


def parse(jre_option: str, cp_option: str) -> Classpath:
    """Build a classpath from the -Xjre and -classpath options."""
    jre_dir = find_jre_dir(jre_option)
    boot = wildcard_entry(os.path.join(jre_dir, "lib", "*"))
    ext = wildcard_entry(os.path.join(jre_dir, "lib", "ext", "*"))
    user = new_entry(cp_option or ".")
    return Classpath(boot=boot, ext=ext, user=user)