"""Lookup value objects: identifiers and user records.

Contents
--------
* :class:`IdentifierKind` – closed set of identifier kinds.
* :class:`Identifier` – tagged ``(kind, value)`` pair handed to a searcher.
* :class:`UserRecord` – flat, immutable result of a successful lookup.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum


class IdentifierKind(Enum):
    """Which directory attribute an :class:`Identifier` is matched against."""

    UID = "uid"
    EMAIL = "email"


@dataclass(frozen=True, slots=True)
class Identifier:
    """A user identifier tagged with its kind.

    Examples
    --------
    >>> Identifier.parse("jdoe@example.com")
    Identifier(kind=<IdentifierKind.EMAIL: 'email'>, value='jdoe@example.com')
    >>> Identifier.parse(" jdoe ").value
    ' jdoe '
    """

    kind: IdentifierKind
    value: str

    @classmethod
    def uid(cls, value: str) -> Identifier:
        return cls(IdentifierKind.UID, value)

    @classmethod
    def email(cls, value: str) -> Identifier:
        return cls(IdentifierKind.EMAIL, value)

    @classmethod
    def parse(cls, text: str) -> Identifier:
        """Classify free-form *text*: anything containing ``@`` is an email.

        The text is kept verbatim so a failed lookup reports exactly what was
        searched for.
        """

        if "@" in text:
            return cls.email(text)
        return cls.uid(text)


@dataclass(frozen=True, slots=True)
class UserRecord:
    """Mapped attributes of one directory entry.

    Every field is a string; attributes missing on the entry stay ``""``.
    """

    uid: str = ""
    email: str = ""
    display_name: str = ""
    surname: str = ""
    title: str = ""
    manager_uid: str = ""
    cost_center: str = ""
    cost_center_desc: str = ""
    location: str = ""
    job_code: str = ""
    uuid: str = ""
    hire_date: str = ""
    term_date: str = ""
    adj_svc_date: str = ""

    @property
    def is_terminated(self) -> bool:
        """``True`` when the directory carries a termination date.

        Examples
        --------
        >>> UserRecord(uid="jdoe").is_terminated
        False
        >>> UserRecord(uid="jdoe", term_date="20240131").is_terminated
        True
        """

        return bool(self.term_date)

    def as_dict(self) -> dict[str, str]:
        return asdict(self)
