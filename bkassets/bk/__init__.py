from .entry import Entry, EMPTY_FLAGS
from .layout import ContainerLayout, DEFAULT_TAG, VARIANTS, infer_alignment
from .container import Container
from .codec import AbstractCodec, BKZipCodec
from .reader import read_container, read_payloads, extract
from .writer import construct, layout_entries
from .manifest import (
    Manifest,
    ManifestRecord,
    MANIFEST_NAME,
    ASSETS_DIR,
    payload_path,
    manifest_from_container,
    dump_manifest,
    load_manifest,
)
from .folder import (
    load_container,
    write_directory,
    load_folder,
    build_container,
    extract_to_directory,
    construct_from_manifest,
)
