import random
from typing import Optional, Sequence, Tuple, TypeVar

from .errors import EmptySelectionError

T = TypeVar("T")


def shuffle(entries: Sequence[T], rng: Optional[random.Random] = None) -> Tuple[T, ...]:
    """
    Returns a Fisher-Yates permutation of ``entries``.

    The input is never modified. Pass a seeded ``random.Random`` to get a
    reproducible order.
    """
    if not entries:
        raise EmptySelectionError()
    source = rng if rng is not None else random.Random()
    order = list(entries)
    for i in range(len(order) - 1, 0, -1):
        j = source.randrange(i + 1)
        order[i], order[j] = order[j], order[i]
    return tuple(order)
