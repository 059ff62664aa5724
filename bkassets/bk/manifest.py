import posixpath

from typing import Optional
from dataclasses import dataclass, field

import yaml

from .entry import EMPTY_FLAGS
from .layout import DEFAULT_TAG, MAX_ALIGNMENT, MAX_SLOTS
from .errors import ManifestParseError, SchemaError, UnknownField


MANIFEST_VERSION = 1
MANIFEST_NAME = "assets.yaml"
ASSETS_DIR = "assets"


@dataclass
class ManifestRecord:
    uid: int
    compressed: bool = False
    flags: int = EMPTY_FLAGS
    offset: int = 0
    stored_size: int = 0
    raw_size: int = 0
    path: Optional[str] = None

    @property
    def empty(self) -> bool:
        return self.path is None

    def to_dict(self) -> dict:
        return {
            "uid": HexInt(self.uid),
            "compressed": self.compressed,
            "flags": HexInt(self.flags),
            "offset": HexInt(self.offset),
            "stored_size": self.stored_size,
            "raw_size": self.raw_size,
            "path": self.path,
        }


@dataclass
class Manifest:
    version: int = MANIFEST_VERSION
    tag: int = DEFAULT_TAG
    alignment: int = 8
    records: list[ManifestRecord] = field(default_factory=list)

    @property
    def uids(self) -> list[int]:
        return [record.uid for record in self.records]


# field name -> (type, required, upper bound)
RECORD_FIELDS = {
    "uid": (int, True, MAX_SLOTS - 1),
    "compressed": (bool, True, None),
    "flags": (int, True, 0xFFFF),
    "offset": (int, False, 0xFFFFFFFF),
    "stored_size": (int, False, 0xFFFFFFFF),
    "raw_size": (int, False, 0xFFFFFFFF),
    "path": (str, False, None),
}

DOCUMENT_FIELDS = {
    "version": (int, True, None),
    "tag": (int, False, 0xFFFFFFFF),
    "alignment": (int, False, MAX_ALIGNMENT),
    "slot_count": (int, False, MAX_SLOTS),
    "entries": (list, True, None),
}

TYPE_NAMES = {int: "an integer", bool: "a boolean", str: "a string", list: "a list"}


class HexInt(int):
    pass


class ManifestDumper(yaml.SafeDumper):
    pass


def _represent_hex(dumper: yaml.SafeDumper, value: HexInt):
    return dumper.represent_scalar("tag:yaml.org,2002:int", f"0x{int(value):04X}")


ManifestDumper.add_representer(HexInt, _represent_hex)


def payload_path(uid: int, assets_dir: str = ASSETS_DIR) -> str:
    return posixpath.join(assets_dir, f"{uid:04X}.bin")


def manifest_from_container(container, assets_dir: str = ASSETS_DIR) -> Manifest:
    records = [
        ManifestRecord(
            uid=entry.uid,
            compressed=entry.is_compressed,
            flags=entry.flags,
            offset=entry.offset,
            stored_size=entry.stored_size,
            raw_size=entry.raw_size,
            path=None if entry.empty else payload_path(entry.uid, assets_dir),
        )
        for entry in container
    ]

    return Manifest(tag=container.tag, alignment=container.layout.alignment, records=records)


def dump_manifest(manifest: Manifest) -> str:
    document = {
        "version": manifest.version,
        "tag": HexInt(manifest.tag),
        "alignment": manifest.alignment,
        "slot_count": len(manifest.records),
        "entries": [record.to_dict() for record in manifest.records],
    }

    return yaml.dump(document, Dumper=ManifestDumper, sort_keys=False, default_flow_style=None, width=1 << 16)


def _mapping_lines(node) -> dict[str, int]:
    if not isinstance(node, yaml.MappingNode):
        return {}
    return {key.value: key.start_mark.line + 1 for key, _ in node.value if isinstance(key, yaml.ScalarNode)}


def _mapping_value(node, name: str):
    if isinstance(node, yaml.MappingNode):
        for key, value in node.value:
            if isinstance(key, yaml.ScalarNode) and key.value == name:
                return value
    return None


def _check_fields(mapping: dict, fields: dict, lines: dict[str, int], where: str, line: Optional[int]) -> dict:
    for name in mapping:
        if name not in fields:
            raise UnknownField(str(name), line=lines.get(name, line), where=where)

    values = {}
    for name, (expected, required, bound) in fields.items():
        if name not in mapping:
            if required:
                raise SchemaError(f"missing required field '{name}' in {where}" + (f" (line {line})" if line else ""))
            continue

        value = mapping[name]
        field_line = lines.get(name, line)

        if value is None and not required:
            values[name] = None
            continue

        if expected is int:
            valid = isinstance(value, int) and not isinstance(value, bool)
        else:
            valid = isinstance(value, expected)

        if not valid:
            raise ManifestParseError(f"expected {TYPE_NAMES[expected]}, got {value!r}", line=field_line, field=name)

        if expected is int and (value < 0 or (bound is not None and value > bound)):
            raise ManifestParseError(f"value {value} out of range 0..{bound}", line=field_line, field=name)

        values[name] = value

    return values


def _check_path(path: str, uid: int, line: Optional[int]):
    parts = path.replace("\\", "/").split("/")
    if posixpath.isabs(path) or ":" in parts[0] or ".." in parts or not path:
        raise SchemaError(f"entry 0x{uid:04X} (line {line}): path '{path}' must be relative to the manifest")


def _parse_record(item, index: int, node, first_uid: int) -> ManifestRecord:
    line = node.start_mark.line + 1 if node is not None else None

    if not isinstance(item, dict):
        raise ManifestParseError(f"entry {index} must be a mapping, got {item!r}", line=line)

    values = _check_fields(item, RECORD_FIELDS, _mapping_lines(node), f"entry {index}", line)

    if values["uid"] < first_uid:
        raise SchemaError(
            f"entry {index} (line {line}): uid 0x{values['uid']:04X} out of table order, "
            f"expected 0x{first_uid:04X} or above"
        )

    record = ManifestRecord(**{name: value for name, value in values.items() if value is not None})

    if record.path is not None:
        _check_path(record.path, record.uid, line)

    return record


def load_manifest(text: str, source: str = "manifest") -> Manifest:
    loader = yaml.SafeLoader(text)
    try:
        root = loader.get_single_node()
        document = loader.construct_document(root) if root is not None else None
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        problem = getattr(e, "problem", None) or str(e)
        raise ManifestParseError(f"{source}: {problem}", line=mark.line + 1 if mark else None) from e
    finally:
        loader.dispose()

    if not isinstance(document, dict):
        raise SchemaError(f"{source}: manifest must be a mapping, got {type(document).__name__}")

    values = _check_fields(document, DOCUMENT_FIELDS, _mapping_lines(root), source, None)

    if values["version"] != MANIFEST_VERSION:
        raise SchemaError(f"{source}: unsupported manifest version {values['version']}, expected {MANIFEST_VERSION}")

    alignment = values.get("alignment")
    if alignment is None:
        alignment = 8
    if alignment < 1 or alignment & (alignment - 1):
        raise SchemaError(f"{source}: alignment must be a power of two, got {alignment}")

    entries_node = _mapping_value(root, "entries")
    nodes = entries_node.value if isinstance(entries_node, yaml.SequenceNode) else []

    records: list[ManifestRecord] = []
    for index, item in enumerate(values["entries"]):
        record = _parse_record(item, index, nodes[index] if index < len(nodes) else None, len(records))
        # uids left out of the list are empty slots
        records.extend(ManifestRecord(uid=uid) for uid in range(len(records), record.uid))
        records.append(record)

    slot_count = values.get("slot_count")
    if slot_count is not None:
        records.extend(ManifestRecord(uid=uid) for uid in range(len(records), slot_count))

    tag = values.get("tag")
    return Manifest(
        version=values["version"],
        tag=DEFAULT_TAG if tag is None else tag,
        alignment=alignment,
        records=records,
    )
