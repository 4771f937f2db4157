"""brewdeps — a vendored Homebrew for native library dependencies."""

__version__ = "0.1.0"
