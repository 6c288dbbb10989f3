"""
Field markers for form derivation.

Attached to record fields with typing.Annotated, the same way on pydantic
models, dataclasses and attrs classes:

    class Person(BaseModel):
        name: Annotated[str, Tags(request='name,required')]
        base: Annotated[Audit, Embedded()]
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Tags:
    """Naming annotations for one field.

    request: ``name[,key[=value]]*``; name '' falls back, '-' skips the field.
    response: response name, first fallback when the request name is empty.
    db: storage column name, second fallback.
    """

    request: str = ''
    response: str = ''
    db: str = ''


@dataclass(frozen=True)
class Embedded:
    """Mark a record field whose fields are spliced into the containing record."""

    pass
