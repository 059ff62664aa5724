import os
import tempfile


def read_file(path: str) -> bytes:
    with open(path, "rb") as file_h:
        return file_h.read()


def write_file_atomic(path: str, data: bytes):
    dir_path = os.path.dirname(os.path.abspath(path))
    os.makedirs(dir_path, exist_ok=True)

    # write next to the destination so the final rename never crosses filesystems
    fd, tmp_path = tempfile.mkstemp(prefix=f".{os.path.basename(path)}.", suffix=".tmp", dir=dir_path)
    try:
        with os.fdopen(fd, "wb") as tmp_h:
            tmp_h.write(data)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
