"""Metadata derived from a document's file name.

Seeded document collections usually encode the academic year and the issuing
office in the file name, e.g. ``信息与控制工程学院2024年推免工作实施细则.pdf``.
:class:`FilenameMetadata` lifts those into chunk metadata so retrieval can
filter on them, and joins them into a ``keywords`` field for hybrid search.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from pathlib import PurePosixPath
from typing import Callable, Union

from rag_ingest.config import settings

MetadataValue = Union[str, int, float, bool]
MetadataEnricher = Callable[[str], dict[str, MetadataValue]]

_YEAR = re.compile(r"20\d{2}")


class FilenameMetadata:
    """Default enricher: ``year``, ``department`` and ``keywords``.

    Parameters
    ----------
    department_rules:
        Department name mapped to the substrings that identify it in a file
        name. Rules are tried in order and the first match wins. Defaults to
        ``settings.department_rules``.
    default_department:
        Department used when no rule matches. Empty means the key is left
        out. Defaults to ``settings.default_department``.
    """

    def __init__(
        self,
        department_rules: Mapping[str, Sequence[str]] | None = None,
        default_department: str | None = None,
    ) -> None:
        self.department_rules = dict(
            settings.department_rules if department_rules is None else department_rules
        )
        self.default_department = (
            settings.default_department if default_department is None else default_department
        )

    def __call__(self, source: str) -> dict[str, MetadataValue]:
        name = PurePosixPath(source).name
        metadata: dict[str, MetadataValue] = {}

        match = _YEAR.search(name)
        if match:
            metadata["year"] = int(match.group())

        department = self.department_for(name)
        if department:
            metadata["department"] = department

        keywords = " ".join(str(metadata[key]) for key in ("year", "department") if key in metadata)
        if keywords:
            metadata["keywords"] = keywords
        return metadata

    def department_for(self, name: str) -> str:
        for department, patterns in self.department_rules.items():
            if any(pattern in name for pattern in patterns):
                return department
        return self.default_department
