[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "jvmlite"
version = "0.1.0"
description = "A small Java virtual machine toolkit: class path search, class file parsing and runtime data areas"
requires-python = ">=3.10"
dependencies = []
keywords = ["jvm", "java", "classfile", "classpath", "bytecode", "interpreter"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Interpreters",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
jvmlite = "jvmlite.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["jvmlite"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
