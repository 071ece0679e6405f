"""Principal entity: an authenticated identity owned by an external user table."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Principal:
    """Minimal view of a principal needed for authorization and audit."""

    id: str
    username: str
