"""swiftstore storage data models."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ListRefsItem:
    """One entry of a container listing.

    Attributes:
        ref: Reference (object name) within the container.
        size: Size of the object content in bytes.
    """

    ref: str
    size: int

    def to_dict(self) -> dict[str, str | int]:
        """Convert item to dictionary for JSON serialization."""
        return {"ref": self.ref, "size": self.size}


@dataclass(frozen=True)
class ListPage:
    """A single page of a container listing.

    Attributes:
        refs: Items on this page, in the order the service returned them.
        next_token: Opaque continuation token for the following page.
            Empty when there are no more pages. Pass it back verbatim.
    """

    refs: list[ListRefsItem] = field(default_factory=list)
    next_token: str = ""

    @property
    def has_more(self) -> bool:
        return bool(self.next_token)
