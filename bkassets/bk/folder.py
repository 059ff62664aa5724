import os

from typing import Optional, Callable

from .container import Container
from .codec import AbstractCodec
from .errors import MissingPayloadFile
from .layout import ContainerLayout
from .manifest import Manifest, MANIFEST_NAME, ASSETS_DIR, manifest_from_container, dump_manifest, load_manifest
from .reader import read_container, read_payloads
from .writer import construct
from ..utils.file import read_file, write_file_atomic
from ..utils.logger import logger


def load_container(
    bin_path: str,
    layout: Optional[ContainerLayout] = None,
    codec: Optional[AbstractCodec] = None,
    workers: int = 1,
    callback: Optional[Callable] = None,
    infer: Optional[bool] = None,
) -> tuple[Container, list[bytes]]:
    data = read_file(bin_path)

    container = read_container(data, layout, codec, infer)

    if callback:
        callback(len(container))

    payloads = read_payloads(container, data, codec, workers, callback)

    logger.debug(f"read {len(container)} slots from {bin_path}")

    return container, payloads


def write_directory(
    container: Container,
    payloads: list[bytes],
    out_dir: str,
    manifest_name: str = MANIFEST_NAME,
    assets_dir: str = ASSETS_DIR,
    callback: Optional[Callable] = None,
) -> Manifest:
    manifest = manifest_from_container(container, assets_dir)
    manifest_text = dump_manifest(manifest)

    if callback:
        callback(len(manifest.records) + 1)

    os.makedirs(os.path.join(out_dir, assets_dir), exist_ok=True)

    for record, payload in zip(manifest.records, payloads):
        if record.path is not None:
            write_file_atomic(os.path.join(out_dir, *record.path.split("/")), payload)

        if callback:
            callback()

    # manifest is written last, after every payload file
    write_file_atomic(os.path.join(out_dir, manifest_name), manifest_text.encode("utf-8"))

    if callback:
        callback()

    return manifest


def load_folder(manifest_path: str, callback: Optional[Callable] = None) -> tuple[Manifest, list[bytes]]:
    with open(manifest_path, "r", encoding="utf-8") as manifest_h:
        manifest = load_manifest(manifest_h.read(), source=os.path.basename(manifest_path))

    base_dir = os.path.dirname(os.path.abspath(manifest_path))

    if callback:
        callback(len(manifest.records) + 1)

    payloads = []
    for record in manifest.records:
        if record.path is None:
            payloads.append(b"")
        else:
            payload_path = os.path.join(base_dir, *record.path.split("/"))
            if not os.path.isfile(payload_path):
                raise MissingPayloadFile(record.uid, payload_path)
            payloads.append(read_file(payload_path))

        if callback:
            callback()

    if callback:
        callback()

    return manifest, payloads


def build_container(
    manifest: Manifest,
    payloads: list[bytes],
    out_path: str,
    layout: Optional[ContainerLayout] = None,
    codec: Optional[AbstractCodec] = None,
    workers: int = 1,
    callback: Optional[Callable] = None,
) -> Container:
    if layout is None:
        layout = ContainerLayout(alignment=manifest.alignment)

    if callback:
        callback(len(manifest.records) + 1)

    container, data = construct(
        list(zip(manifest.records, payloads)), layout, tag=manifest.tag, codec=codec, workers=workers, callback=callback
    )

    write_file_atomic(out_path, data)

    if callback:
        callback()

    return container


def extract_to_directory(
    bin_path: str,
    out_dir: str,
    layout: Optional[ContainerLayout] = None,
    codec: Optional[AbstractCodec] = None,
    workers: int = 1,
    manifest_name: str = MANIFEST_NAME,
    assets_dir: str = ASSETS_DIR,
    infer: Optional[bool] = None,
) -> Manifest:
    container, payloads = load_container(bin_path, layout, codec, workers, infer=infer)
    return write_directory(container, payloads, out_dir, manifest_name, assets_dir)


def construct_from_manifest(
    manifest_path: str,
    out_path: str,
    layout: Optional[ContainerLayout] = None,
    codec: Optional[AbstractCodec] = None,
    workers: int = 1,
) -> Container:
    manifest, payloads = load_folder(manifest_path)
    return build_container(manifest, payloads, out_path, layout, codec, workers)
