"""Language version requests, Node.js toolchain installation and hook helpers for git hook runners."""

__version__ = "0.1.0"