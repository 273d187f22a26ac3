"""Local directory snapshots: format detection, encoding and export.

Two on-disk formats exist:

``JSON``
    The ACME wire shape (``newNonce``, ``newOrder``, ...) as produced
    by the server, plus ``resourceUrl``.  Selected by a ``.json``
    suffix.

``SNAPSHOT``
    A YAML document whose root carries the ``!acmedir/directory``
    tag.  Written by :func:`export_directory` for every other suffix.
    Plain YAML or JSON without the tag is rejected, so a file is only
    ever read under the format its name announces.

Usage::

    export_directory(directory, "staging.acmedir")
    loads_snapshot(Path("staging.acmedir").read_bytes()) == directory
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from acmedir.core.types import SnapshotFormat
from acmedir.models.directory import ENDPOINT_FIELDS, Directory, DirectoryMeta

log = logging.getLogger(__name__)

SNAPSHOT_TAG = "!acmedir/directory"
SNAPSHOT_VERSION = 1

_HEADER = "# ACME directory snapshot written by acmedir; do not edit.\n"


def detect_format(path: str | Path) -> SnapshotFormat:
    """Map a file name to its snapshot format.

    ``.json`` (any case) is JSON; every other suffix, including none,
    is the tagged snapshot format.
    """
    if Path(path).suffix.lower() == ".json":
        return SnapshotFormat.JSON
    return SnapshotFormat.SNAPSHOT


# ---------------------------------------------------------------------------
# YAML tag handling
# ---------------------------------------------------------------------------


class _SnapshotDumper(yaml.SafeDumper):
    pass


class _SnapshotLoader(yaml.SafeLoader):
    pass


def _snapshot_mapping(directory: Directory) -> dict[str, Any]:
    meta = directory.meta
    return {
        "version": SNAPSHOT_VERSION,
        "resource_url": directory.resource_url,
        "endpoints": {attr: getattr(directory, attr) for attr in ENDPOINT_FIELDS.values()},
        "meta": None
        if meta is None
        else {
            "terms_of_service": meta.terms_of_service,
            "website": meta.website,
            "caa_identities": list(meta.caa_identities),
            "external_account_required": meta.external_account_required,
            "profiles": list(meta.profiles),
        },
    }


def _represent_directory(dumper: yaml.SafeDumper, directory: Directory) -> yaml.Node:
    return dumper.represent_mapping(SNAPSHOT_TAG, _snapshot_mapping(directory))


def _optional_str(data: dict, key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        msg = f"'{key}' must be a string or null"
        raise ValueError(msg)
    return value


def _str_list(data: dict, key: str) -> tuple[str, ...]:
    value = data.get(key)
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        msg = f"'{key}' must be a list of strings"
        raise ValueError(msg)
    return tuple(value)


def _flag(data: dict, key: str) -> bool:
    value = data.get(key, False)
    if not isinstance(value, bool):
        msg = f"'{key}' must be true or false"
        raise ValueError(msg)
    return value


def _construct_directory(loader: yaml.SafeLoader, node: yaml.Node) -> Directory:
    if not isinstance(node, yaml.MappingNode):
        msg = f"{SNAPSHOT_TAG} must tag a mapping"
        raise ValueError(msg)
    data = loader.construct_mapping(node, deep=True)

    version = data.get("version")
    # bool is an int subclass: ``version: true`` must not pass as 1
    if type(version) is not int or version != SNAPSHOT_VERSION:
        msg = f"unsupported snapshot version {version!r}"
        raise ValueError(msg)

    endpoints = data.get("endpoints") or {}
    if not isinstance(endpoints, dict):
        msg = "'endpoints' must be a mapping"
        raise ValueError(msg)

    meta_data = data.get("meta")
    meta = None
    if meta_data is not None:
        if not isinstance(meta_data, dict):
            msg = "'meta' must be a mapping or null"
            raise ValueError(msg)
        meta = DirectoryMeta(
            terms_of_service=_optional_str(meta_data, "terms_of_service"),
            website=_optional_str(meta_data, "website"),
            caa_identities=_str_list(meta_data, "caa_identities"),
            external_account_required=_flag(meta_data, "external_account_required"),
            profiles=_str_list(meta_data, "profiles"),
        )

    return Directory(
        **{attr: _optional_str(endpoints, attr) for attr in ENDPOINT_FIELDS.values()},
        meta=meta,
        resource_url=_optional_str(data, "resource_url"),
    )


_SnapshotDumper.add_representer(Directory, _represent_directory)
_SnapshotLoader.add_constructor(SNAPSHOT_TAG, _construct_directory)


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def dumps_snapshot(directory: Directory) -> str:
    """Encode *directory* as a tagged snapshot document."""
    body = yaml.dump(
        directory,
        Dumper=_SnapshotDumper,
        default_flow_style=False,
        sort_keys=False,
    )
    return _HEADER + body


def loads_snapshot(data: str | bytes) -> Directory:
    """Decode a tagged snapshot document.

    Raises
    ------
    ValueError
        If *data* is not valid YAML or its root is not a directory
        snapshot of a supported version.

    """
    try:
        obj = yaml.load(data, Loader=_SnapshotLoader)  # noqa: S506
    except yaml.YAMLError as exc:
        msg = f"invalid snapshot document: {exc}"
        raise ValueError(msg) from exc
    if not isinstance(obj, Directory):
        msg = f"document root is not tagged {SNAPSHOT_TAG}"
        raise ValueError(msg)
    return obj


def dumps_json(directory: Directory) -> str:
    """Encode *directory* in the JSON wire shape."""
    return json.dumps(directory.to_dict(), indent=2) + "\n"


def loads_json(data: str | bytes) -> Directory:
    """Decode a JSON directory document.

    Raises
    ------
    ValueError
        If *data* is not JSON or its root is not an object.

    """
    try:
        obj = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        msg = f"invalid JSON: {exc}"
        raise ValueError(msg) from exc
    if not isinstance(obj, dict):
        msg = f"expected a JSON object, got {type(obj).__name__}"
        raise ValueError(msg)
    return Directory.from_dict(obj)


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


def export_directory(
    directory: Directory,
    path: str | Path,
    fmt: SnapshotFormat | None = None,
) -> Path:
    """Write *directory* to *path* and return the path written.

    The format follows :func:`detect_format` unless *fmt* is given.
    Note that forcing a format that disagrees with the suffix produces
    a file that cannot be loaded back by name.
    """
    target = Path(path)
    fmt = fmt or detect_format(target)
    text = dumps_json(directory) if fmt is SnapshotFormat.JSON else dumps_snapshot(directory)
    target.write_text(text, encoding="utf-8")
    log.info(
        "Exported ACME directory to %s (%s)",
        target,
        fmt.value,
        extra={"snapshot_path": str(target)},
    )
    return target
