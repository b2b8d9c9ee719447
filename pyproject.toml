[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "oslab"
version = "0.1.0"
description = "Operating-system exercises in Python: a page table, message-slot and character device models, a FIFO queue and a printable-character counting server"
requires-python = ">=3.10"
dependencies = []
keywords = ["operating systems", "page table", "queue", "sockets", "device"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Operating System",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
oslab-pagetable = "oslab.pagetable:main"
oslab-message-sender = "oslab.slotcli:sender_main"
oslab-message-reader = "oslab.slotcli:reader_main"
oslab-chardev = "oslab.chardev:main"
oslab-pcc-server = "oslab.pccserver:main"
oslab-pcc-client = "oslab.pccclient:main"

[tool.hatch.build.targets.wheel]
packages = ["oslab"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
