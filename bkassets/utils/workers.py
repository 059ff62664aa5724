from typing import Callable, Optional, Sequence, TypeVar
from concurrent.futures import ThreadPoolExecutor, as_completed


T = TypeVar("T")
R = TypeVar("R")


def map_ordered(
    func: Callable[[T], R], items: Sequence[T], workers: int = 1, callback: Optional[Callable] = None
) -> list[R]:
    if workers <= 1 or len(items) <= 1:
        results = []
        for item in items:
            results.append(func(item))
            if callback:
                callback()
        return results

    ordered: list = [None] * len(items)
    failures: dict[int, BaseException] = {}

    with ThreadPoolExecutor(max_workers=workers) as executor:
        future_to_index = {executor.submit(func, item): index for index, item in enumerate(items)}

        for future in as_completed(future_to_index):
            index = future_to_index[future]
            error = future.exception()

            if error is not None:
                failures[index] = error
                continue

            ordered[index] = future.result()
            if callback:
                callback()

    # report the failure a sequential run would have hit first
    if failures:
        raise failures[min(failures)]

    return ordered
