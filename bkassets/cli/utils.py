import os
import argparse

from ..bk.layout import MAX_ALIGNMENT


def positive_int(value: str) -> int:
    try:
        number = int(value, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{value}' is not an integer")  # pylint: disable=raise-missing-from

    if number < 1:
        raise argparse.ArgumentTypeError(f"{number} must be at least 1")

    return number


def power_of_two(value: str) -> int:
    number = positive_int(value)

    if number & (number - 1):
        raise argparse.ArgumentTypeError(f"{number} is not a power of two")

    if number > MAX_ALIGNMENT:
        raise argparse.ArgumentTypeError(f"{number} exceeds the largest alignment {MAX_ALIGNMENT}")

    return number


def is_manifest_file(file_path: str) -> bool:
    return os.path.isfile(file_path) and os.path.splitext(file_path)[1].lower() in (".yaml", ".yml")
