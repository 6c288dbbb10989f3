"""
MIME type strings.

    >>> MimeType.parse('application/vnd.brewnet.form+json; method=PUT')
    MimeType(category='application', name='vnd.brewnet.form', suffix='json', params={'method': 'PUT'})
"""

from __future__ import annotations

from collections.abc import Mapping

import attrs

__all__ = ['MimeType', 'base_type']


def base_type(content_type: str) -> str:
    """Content type without parameters or '+suffix'."""
    content_type = content_type.split(';', 1)[0].strip()
    return content_type.split('+', 1)[0]


@attrs.define(frozen=True)
class MimeType:
    """A parsed ``category/name[+suffix][; key=value]*`` content type."""

    category: str
    name: str
    suffix: str | None = None
    params: Mapping[str, str] = attrs.field(factory=dict, eq=False)

    @classmethod
    def parse(cls, text: str) -> MimeType:
        """
        Parse a content type string.

        Raises:
            ValueError: If text has no '/' separator
        """
        media, *raw_params = text.split(';')
        category, sep, subtype = media.strip().partition('/')
        if not sep:
            raise ValueError(f'Invalid MIME type: {text!r}')

        name, plus, suffix = subtype.partition('+')
        params: dict[str, str] = {}
        for raw in raw_params:
            key, _, value = raw.strip().partition('=')
            if key:
                params[key.strip()] = value.strip().strip('"')
        return cls(category, name, suffix if plus else None, params)

    @property
    def subtype(self) -> str:
        return f'{self.name}+{self.suffix}' if self.suffix is not None else self.name

    @property
    def base(self) -> str:
        return f'{self.category}/{self.name}'

    def __str__(self) -> str:
        params = ''.join(f'; {key}={value}' for key, value in self.params.items())
        return f'{self.category}/{self.subtype}{params}'
