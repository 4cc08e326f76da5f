"""Accession numbering for generated ontology terms."""

from __future__ import annotations


class AccessionAssigner:
    """Issue ``<prefix>:<zero padded number>`` accessions in creation order.

    A single assigner is shared by every component that creates terms so the
    numbering stays gap free and strictly increasing across the whole run.
    """

    def __init__(self, prefix: str = "VBGEO", *, start: int = 1, width: int = 7) -> None:
        if not prefix:
            raise ValueError("Accession prefix must be a non-empty string")
        if start < 0:
            raise ValueError("Accession counter cannot start below zero")
        self.prefix = prefix
        self.width = width
        self._next = int(start)
        self._issued = 0

    @property
    def issued(self) -> int:
        return self._issued

    def assign(self) -> str:
        accession = self._format(self._next)
        self._next += 1
        self._issued += 1
        return accession

    def _format(self, number: int) -> str:
        return f"{self.prefix}:{number:0{self.width}d}"


__all__ = ["AccessionAssigner"]
