from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, TypeVar, Union

from .errors import InvalidArgumentError

Z = TypeVar("Z")


def validate_batch_size(batch_size: int) -> None:
    if isinstance(batch_size, bool) or not isinstance(batch_size, int) or batch_size <= 0:
        raise InvalidArgumentError("Batch size should be greater than zero.")


def partition(
    items: Optional[Union[Sequence[Z], Iterable[Z]]], batch_size: int
) -> List[List[Z]]:
    """
    Splits items into contiguous batches of at most `batch_size` elements.

    The split is a sliding window: starting at index 0, take up to
    `batch_size` elements, advance by `batch_size` and repeat until the
    source is exhausted. Only the last batch may be shorter. Concatenating
    the batches in order gives back the original sequence.

    Example:
        >>> partition([1, 2, 3, 4, 5], 2)
        [[1, 2], [3, 4], [5]]

    Args:
        items: The elements to split. Iterables that are not sequences are
            materialised into a list first.
        batch_size: The maximum number of elements per batch.

    Returns:
        A list of batches, each batch a list.

    Raises:
        InvalidArgumentError: If no items are given or `batch_size` is not a
            positive integer.
    """
    if items is not None and not isinstance(items, Sequence):
        items = list(items)
    if not items:
        raise InvalidArgumentError("Items were not provided.")
    validate_batch_size(batch_size)

    return [list(items[i : i + batch_size]) for i in range(0, len(items), batch_size)]
