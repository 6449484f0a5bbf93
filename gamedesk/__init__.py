"""GameDesk: autosaving edit client for a remote game collection."""

__version__ = "0.3.0"
