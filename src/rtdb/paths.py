"""Hierarchical node paths.

A path is an ordered sequence of non-empty segments. The canonical string
form (``"/" + "/".join(segments)``) doubles as the resource identifier sent
to the database, so two paths are equal exactly when their canonical
strings are equal.
"""

from dataclasses import dataclass

from .errors import ValidationError

SEPARATOR = "/"

# Characters the database refuses in keys
INVALID_CHARS = ".$#[]"


def split_path(text: str) -> tuple[str, ...]:
    """Split a slash-delimited path string into its non-empty segments."""
    return tuple(seg for seg in text.split(SEPARATOR) if seg)


@dataclass(frozen=True)
class NodePath:
    """Location of a node in the database tree."""

    segments: tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str) -> "NodePath":
        """Parse a path string.

        Args:
            text: Slash-delimited path; "", "/" and "//" all mean the root

        Returns:
            NodePath for the given string

        Raises:
            ValidationError: If the path contains a character the database
                does not allow in keys
        """
        bad = [c for c in INVALID_CHARS if c in text]
        if bad:
            raise ValidationError(
                f"invalid path {text!r}: must not contain any of {INVALID_CHARS!r}"
            )
        return cls(split_path(text))

    @classmethod
    def root(cls) -> "NodePath":
        return cls()

    @property
    def is_root(self) -> bool:
        return not self.segments

    @property
    def key(self) -> str | None:
        """Last segment, or None at the root."""
        return self.segments[-1] if self.segments else None

    def child(self, path: str) -> "NodePath":
        """Path of a descendant node.

        Args:
            path: Relative path; may hold several segments ("a/b")

        Raises:
            ValidationError: If ``path`` starts with "/" or names no segment
        """
        if path.startswith(SEPARATOR):
            raise ValidationError(f"child path must not start with {SEPARATOR!r}")
        if not split_path(path):
            raise ValidationError("child path must not be empty")
        return NodePath.parse(f"{self}{SEPARATOR}{path}")

    def parent(self) -> "NodePath | None":
        """Path with the last segment removed, or None at the root."""
        if self.is_root:
            return None
        return NodePath(self.segments[:-1])

    def __str__(self) -> str:
        return SEPARATOR + SEPARATOR.join(self.segments)
