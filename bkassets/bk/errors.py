from typing import Optional


class BKAssetError(Exception):
    pass


class TruncatedHeader(BKAssetError):
    def __init__(self, size: int, expected: int):
        super().__init__(f"truncated header: container is {size} bytes, header needs {expected}")
        self.size = size
        self.expected = expected


class TruncatedToc(BKAssetError):
    def __init__(self, slot_count: int, size: int, expected: int):
        super().__init__(
            f"truncated table of contents: {slot_count} slots need {expected} bytes, container is {size} bytes"
        )
        self.slot_count = slot_count
        self.size = size
        self.expected = expected


class InvalidLayout(BKAssetError):
    def __init__(self, index: int, reason: str):
        super().__init__(f"invalid layout at entry 0x{index:04X}: {reason}")
        self.index = index
        self.reason = reason


class PayloadOutOfBounds(BKAssetError):
    def __init__(self, index: int, start: int, end: int, size: int):
        super().__init__(
            f"entry 0x{index:04X} payload [0x{start:X}, 0x{end:X}) exceeds container of 0x{size:X} bytes"
        )
        self.index = index
        self.start = start
        self.end = end
        self.size = size


class CodecError(BKAssetError):
    def __init__(self, message: str, index: Optional[int] = None):
        if index is not None:
            message = f"entry 0x{index:04X}: {message}"
        super().__init__(message)
        self.index = index


class SizeMismatch(BKAssetError):
    def __init__(self, index: int, expected: int, actual: int):
        super().__init__(f"entry 0x{index:04X} inflates to {actual} bytes, header records {expected}")
        self.index = index
        self.expected = expected
        self.actual = actual


class ManifestParseError(BKAssetError):
    def __init__(self, message: str, line: Optional[int] = None, field: Optional[str] = None):
        context = []
        if line is not None:
            context.append(f"line {line}")
        if field is not None:
            context.append(f"field '{field}'")
        if context:
            message = f"{', '.join(context)}: {message}"
        super().__init__(message)
        self.line = line
        self.field = field


class MissingPayloadFile(BKAssetError):
    def __init__(self, uid: int, path: str):
        super().__init__(f"entry 0x{uid:04X} payload file not found: {path}")
        self.uid = uid
        self.path = path


class SchemaError(BKAssetError):
    pass


class UnknownField(SchemaError):
    def __init__(self, field: str, line: Optional[int] = None, where: str = "manifest"):
        location = f" (line {line})" if line is not None else ""
        super().__init__(f"unknown field '{field}' in {where}{location}")
        self.field = field
        self.line = line


class ConfigError(BKAssetError):
    pass
