"""Entity models for resolved directories.

All models are frozen dataclasses.  Use :func:`dataclasses.replace`
for modifications (copy-on-write).
"""

from acmedir.models.directory import Directory, DirectoryMeta

__all__ = [
    "Directory",
    "DirectoryMeta",
]
