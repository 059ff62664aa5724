import sys
from abc import ABC
from typing import Optional
from dataclasses import dataclass


RED = "\x1b[1;31m"
UNDERLINE = "\x1b[4m"
RESET = "\x1b[0m"


@dataclass
class AbstractStageError(ABC):
    """Diagnostic block for a failed CLI stage. Subclasses only set the three messages."""

    error_msg: str
    explanation: str
    suggestion: str

    def __post_init__(self):
        raise RuntimeError("stage errors are printed through their class, not instantiated")

    @classmethod
    def lines(cls, detail: Optional[str] = None) -> list[str]:
        lines = [cls.error_msg.replace("Error", f"{RED}Error{RESET}")]
        if detail:
            lines.append(detail.rstrip("."))
        lines += [f"{UNDERLINE}{cls.explanation}{RESET}", cls.suggestion]
        return lines

    @classmethod
    def print(cls, detail: Optional[str] = None, file=None):
        file = file or sys.stdout
        file.flush()
        file.write("\n" + "".join(f"  {line}.\n" for line in cls.lines(detail)) + "\n")
        file.flush()
