import sys
import tqdm

from typing import Type, Optional

from .error import AbstractStageError
from ..bk.errors import BKAssetError
from ..utils.logger import logger


class Progress:
    """
    Progress bar for one CLI stage, passed as `callback` to the pipeline functions: called once
    with the number of steps, then once per finished step. A failure inside the block, or a bar
    left unfinished, prints the stage error and exits with status 1.
    """

    def __init__(self, desc: str, error: Type[AbstractStageError], tpad=20, ncols=50):
        self.error = error
        self.pbar = tqdm.tqdm(
            bar_format=f"{{desc}}: {{percentage:3.0f}}% ┤{{bar:{ncols}}}├ {{n_fmt}}/{{total_fmt}}{{bar:-{ncols}b}}",
            desc=f"  \x1b[93m{desc:{tpad}s}\x1b[0m",
            smoothing=1,
            colour="blue",
            file=sys.stdout,
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, exc_traceback):
        finished = exc_type is None and self.pbar.total is not None and self.pbar.n >= self.pbar.total
        self._close("green" if finished else "red")

        if finished:
            return

        if exc_type is not None and not issubclass(exc_type, (BKAssetError, OSError)):
            logger.debug("unexpected failure", exc_info=(exc_type, exc_value, exc_traceback))

        self.error.print(detail=str(exc_value) if exc_value is not None else None)
        sys.exit(1)

    def _close(self, colour: str):
        if self.pbar.total is not None and self.pbar.n > self.pbar.total:
            self.pbar.n = self.pbar.total

        self.pbar.colour = colour
        self.pbar.refresh()
        self.pbar.close()

    def __call__(self, total: Optional[int] = None):
        if total:
            self.pbar.reset(total=total)
        else:
            self.pbar.update(1)
