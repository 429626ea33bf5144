"""
Hierarchical ACL authorization.

A caller presents ACL strings of the form ``Path=Perm1,Perm2`` (for example
``Project/INTERNAL=V,A``). A permission granted on a path is inherited by
every path below it, so ``Project/INTERNAL=A`` also authorizes
``Project/INTERNAL/Task/17``.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)


class Permission(str, Enum):
    """Standard permission codes used in ACL entries."""
    VIEW = "V"
    EDIT = "E"
    APPROVE = "A"
    MANAGE = "M"
    TRACK = "T"

    @property
    def label(self) -> str:
        """Human readable name, e.g. "Approve" for "A"."""
        return self.name.capitalize()

    @classmethod
    def parse(cls, code: str) -> Optional["Permission"]:
        """Parse a permission code case-insensitively; None if unknown."""
        try:
            return cls(code.strip().upper())
        except ValueError:
            return None


PATH_SEPARATOR = "/"
PATH_SEGMENT_PATTERN = re.compile(r"[A-Za-z0-9_-]+")
PERMISSION_PATTERN = re.compile(r"[A-Za-z]")


def normalize_path(path: str) -> Tuple[str, ...]:
    """
    Split a resource path into comparable segments.
    Empty segments (leading, trailing or doubled slashes) are dropped and
    segments are compared case-insensitively.
    """
    return tuple(
        segment.strip().casefold()
        for segment in path.split(PATH_SEPARATOR)
        if segment.strip()
    )


@dataclass(frozen=True)
class AclEntry:
    """A single parsed ACL entry."""

    path: str
    permissions: FrozenSet[Permission]

    @property
    def segments(self) -> Tuple[str, ...]:
        return normalize_path(self.path)


def parse_acl_entry(raw: str) -> Optional[AclEntry]:
    """
    Parse one ACL string of the form ``Segment(/Segment)*=Perm(,Perm)*``.

    Returns None for malformed input: a missing ``=``, an empty path or path
    segment, a segment outside ``[A-Za-z0-9_-]``, an empty permission token
    or an unknown permission code. No whitespace is allowed anywhere. An
    empty permission list (``Path=``) is valid and grants nothing.
    """
    if not isinstance(raw, str) or "=" not in raw:
        return None

    path, _, permission_list = raw.partition("=")
    if not all(PATH_SEGMENT_PATTERN.fullmatch(segment) for segment in path.split(PATH_SEPARATOR)):
        return None

    permissions = set()
    if permission_list:
        for code in permission_list.split(","):
            if not PERMISSION_PATTERN.fullmatch(code):
                return None
            permission = Permission.parse(code)
            if permission is None:
                return None
            permissions.add(permission)

    return AclEntry(path=path, permissions=frozenset(permissions))


class AccessControlList:
    """
    A caller's parsed ACL, built fresh for every request.

    Entries for the same path (compared case-insensitively) are merged.
    """

    def __init__(self, entries: Iterable[AclEntry] = ()):
        self._entries: List[AclEntry] = list(entries)
        self._grants: Dict[Tuple[str, ...], FrozenSet[Permission]] = {}
        for entry in self._entries:
            key = entry.segments
            self._grants[key] = self._grants.get(key, frozenset()) | entry.permissions

    @classmethod
    def from_claims(cls, claims: Optional[Iterable[str]]) -> "AccessControlList":
        """Parse ACL claim strings, skipping malformed ones."""
        entries = []
        for raw in claims or ():
            entry = parse_acl_entry(raw)
            if entry is None:
                logger.debug("Skipping malformed ACL entry: %r", raw)
                continue
            entries.append(entry)
        return cls(entries)

    @property
    def entries(self) -> List[AclEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def has_permission(self, resource_path: str, permission: Union[Permission, str]) -> bool:
        """
        Check a permission on a resource path, falling back to ancestor paths.

        The full path is checked first, then each parent obtained by dropping
        the last segment, up to the root.
        """
        required = permission if isinstance(permission, Permission) else Permission.parse(permission)
        if required is None:
            return False

        segments = normalize_path(resource_path)
        for depth in range(len(segments), -1, -1):
            granted = self._grants.get(segments[:depth])
            if granted is not None and required in granted:
                return True

        return False

    def has_any_permission(self, resource_path: str, *permissions: Union[Permission, str]) -> bool:
        return any(self.has_permission(resource_path, permission) for permission in permissions)

    def has_all_permissions(self, resource_path: str, *permissions: Union[Permission, str]) -> bool:
        return all(self.has_permission(resource_path, permission) for permission in permissions)

    def to_claims(self) -> List[str]:
        """Serialize back to the ACL wire format."""
        return [
            f"{entry.path}={','.join(sorted(p.value for p in entry.permissions))}"
            for entry in self._entries
        ]
