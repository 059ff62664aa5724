import os
import sys
import argparse

from dataclasses import dataclass

from ..error import AbstractStageError
from ..progress import Progress
from ..utils import positive_int, power_of_two, is_manifest_file
from ...config import BKAssetsConfig
from ...bk.codec import BKZipCodec
from ...bk.errors import BKAssetError
from ...bk.folder import load_container, write_directory, load_folder, build_container
from ...utils.logger import logger, set_verbose


@dataclass
class StageErrorConfig(AbstractStageError):
    error_msg = "Error while loading configuration"
    explanation = "The configuration file is missing or is not valid JSON"
    suggestion = "Please check the path given with --config and its contents"


@dataclass
class StageErrorFileExist(AbstractStageError):
    error_msg = "Error while accessing input files"
    explanation = "The input file cannot be accessed or read"
    suggestion = "Please check that the provided file exists and that it can be read"


@dataclass
class StageErrorReadBin(AbstractStageError):
    error_msg = "Error while reading asset container"
    explanation = "The container is truncated, its table is inconsistent or an entry does not decompress"
    suggestion = "Please check that the input is an unmodified asset container"


@dataclass
class StageErrorWriteAssets(AbstractStageError):
    error_msg = "Error while writing assets"
    explanation = "Disk may be full or you may be trying to write somewhere you are not allowed to"
    suggestion = "Check disk space and destination folder and try again"


@dataclass
class StageErrorReadManifest(AbstractStageError):
    error_msg = "Error while reading manifest"
    explanation = "The manifest cannot be parsed or one of the files it lists is missing"
    suggestion = "Please fix the manifest or restore the missing asset files"


@dataclass
class StageErrorWriteBin(AbstractStageError):
    error_msg = "Error while building asset container"
    explanation = "An entry could not be compressed or the output file could not be written"
    suggestion = "Check disk space and destination folder and try again"


def make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bkassets", description="Banjo-Kazooie asset container tool")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", dest="config", type=str, help="path to a JSON configuration file")
    common.add_argument(
        "--alignment",
        dest="alignment",
        type=power_of_two,
        help="entry alignment boundary in bytes (default: inferred on extract, from the manifest on construct)",
    )
    common.add_argument("--workers", dest="workers", type=positive_int, help="threads used to (de)compress entries")
    common.add_argument("-v", "--verbose", dest="verbose", action="store_true", help="log every entry")

    subparsers = parser.add_subparsers(dest="command", required=True)

    extract_parser = subparsers.add_parser(
        "extract", aliases=["e"], parents=[common], help="split a container into a manifest and loose files"
    )
    extract_parser.add_argument("input_bin", type=str, help="path to the asset container")
    extract_parser.add_argument("output_dir", type=str, help="directory receiving the manifest and asset files")

    construct_parser = subparsers.add_parser(
        "construct", aliases=["c"], parents=[common], help="rebuild a container from a manifest and loose files"
    )
    construct_parser.add_argument("input_manifest", type=str, help="path to the manifest written by extract")
    construct_parser.add_argument("output_bin", type=str, help="output path for the container")
    construct_parser.add_argument(
        "-f", "--force", dest="force", action="store_true", help="overwrite the output container if it exists"
    )

    return parser


def load_config(args) -> BKAssetsConfig:
    try:
        config = BKAssetsConfig(args.config)
    except BKAssetError as e:
        StageErrorConfig.print(detail=str(e))
        sys.exit(1)

    if args.alignment:
        config.set("layout", "alignment", args.alignment)
    if args.workers:
        config.set("workers", args.workers)

    try:
        config.layout()
    except BKAssetError as e:
        StageErrorConfig.print(detail=str(e))
        sys.exit(1)

    return config


def run_extract(args, config: BKAssetsConfig):
    if not os.path.isfile(args.input_bin):
        StageErrorFileExist.print(detail=f"not a file: {args.input_bin}")
        sys.exit(1)

    # alignment comes from the container unless one is configured
    layout = config.layout()
    infer = config.alignment is None

    with Progress("Reading container", StageErrorReadBin) as pbar:
        codec = BKZipCodec(level=config.level)
        container, payloads = load_container(args.input_bin, layout, codec, config.workers, pbar, infer)

    with Progress("Writing assets", StageErrorWriteAssets) as pbar:
        write_directory(container, payloads, args.output_dir, config.manifest_name, config.assets_dir, callback=pbar)

    logger.info(f"Extracted {len(container)} slots to {args.output_dir}")


def run_construct(args, config: BKAssetsConfig):
    if not is_manifest_file(args.input_manifest):
        StageErrorFileExist.print(detail=f"not a manifest file: {args.input_manifest}")
        sys.exit(1)

    if os.path.exists(args.output_bin) and not args.force:
        print()
        print("  Output container already exists. This program will not overwrite")
        print("  it unless --force is given. You should specify a new path.")
        print()
        sys.exit(1)

    with Progress("Reading manifest", StageErrorReadManifest) as pbar:
        manifest, payloads = load_folder(args.input_manifest, callback=pbar)

    with Progress("Building container", StageErrorWriteBin) as pbar:
        codec = BKZipCodec(level=config.level)
        layout = config.layout(manifest.alignment)
        container = build_container(manifest, payloads, args.output_bin, layout, codec, config.workers, callback=pbar)

    logger.info(f"Built {args.output_bin} with {len(container)} slots (0x{container.length:X} bytes)")


def main(argv=None):
    args = make_parser().parse_args(argv)

    set_verbose(args.verbose)
    config = load_config(args)

    print()

    if args.command in ("extract", "e"):
        run_extract(args, config)
    else:
        run_construct(args, config)

    print()


if __name__ == "__main__":
    main()
