"""Minimal edit scripts between record sequences, rendered as unified diffs."""

from collections.abc import Iterator, Sequence
from enum import StrEnum

from schemadiff.errors import FormattingError


class Marker(StrEnum):
    """Line prefix telling which side an element belongs to."""

    COMMON = " "
    LEFT = "-"
    RIGHT = "+"


type Edit[T] = tuple[Marker, T]


def _align[T](left: Sequence[T], right: Sequence[T]) -> Iterator[Edit[T]]:
    """Longest common subsequence alignment, consuming from the left on ties."""
    # lengths[i][j] is the LCS length of left[i:] and right[j:]
    lengths = [[0] * (len(right) + 1) for _ in range(len(left) + 1)]
    for i in reversed(range(len(left))):
        for j in reversed(range(len(right))):
            if left[i] == right[j]:
                lengths[i][j] = lengths[i + 1][j + 1] + 1
            else:
                lengths[i][j] = max(lengths[i + 1][j], lengths[i][j + 1])

    i = j = 0
    while i < len(left) and j < len(right):
        if left[i] == right[j]:
            yield Marker.COMMON, left[i]
            i += 1
            j += 1
        elif lengths[i + 1][j] >= lengths[i][j + 1]:
            yield Marker.LEFT, left[i]
            i += 1
        else:
            yield Marker.RIGHT, right[j]
            j += 1

    yield from ((Marker.LEFT, item) for item in left[i:])
    yield from ((Marker.RIGHT, item) for item in right[j:])


def edit_script[T](left: Sequence[T], right: Sequence[T]) -> list[Edit[T]]:
    """Return the canonical minimal edit script turning ``left`` into ``right``.

    Elements are atomic and compared with ``==`` only. The common prefix and
    suffix are matched directly; only the middle goes through the quadratic
    alignment.
    """
    limit = min(len(left), len(right))
    prefix = 0
    while prefix < limit and left[prefix] == right[prefix]:
        prefix += 1
    suffix = 0
    while suffix < limit - prefix and left[-1 - suffix] == right[-1 - suffix]:
        suffix += 1

    script: list[Edit[T]] = [(Marker.COMMON, item) for item in left[:prefix]]
    script.extend(
        _align(
            left[prefix : len(left) - suffix],
            right[prefix : len(right) - suffix],
        ),
    )
    script.extend((Marker.COMMON, item) for item in left[len(left) - suffix :])
    return script


def render_script[T](name_left: str, name_right: str, script: list[Edit[T]]) -> str:
    """Render an edit script with a ``---``/``+++`` header, one line per edit."""
    lines = [f"--- {name_left}\n", f"+++ {name_right}\n"]
    for marker, item in script:
        try:
            text = str(item)
        except Exception as err:
            msg = f"Cannot render {type(item).__name__} for diff line"
            raise FormattingError(msg) from err
        lines.append(f"{marker}{text}\n")
    return "".join(lines)


def diff_sequences[T](
    name_left: str,
    left: Sequence[T],
    name_right: str,
    right: Sequence[T],
) -> str | None:
    """If the sequences differ, return their differences in unified diff form."""
    script = edit_script(left, right)
    if all(marker is Marker.COMMON for marker, _ in script):
        return None
    return render_script(name_left, name_right, script)
