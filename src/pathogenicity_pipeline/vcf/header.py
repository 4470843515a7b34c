"""VCF header handling: pass-through meta lines plus new INFO declarations."""

import re
from dataclasses import dataclass, field

import structlog

logger = structlog.get_logger()

_INFO_ID = re.compile(r"^##INFO=<ID=([^,>]+)")


@dataclass(frozen=True)
class InfoDeclaration:
    """Meta-information declaration for one INFO tag."""

    id: str
    description: str
    number: str = "."
    type: str = "String"

    def to_meta_line(self) -> str:
        description = self.description.replace("\\", "\\\\").replace('"', '\\"')
        return (
            f'##INFO=<ID={self.id},Number={self.number},Type={self.type},'
            f'Description="{description}">'
        )


@dataclass
class VcfHeader:
    """Header lines of a VCF.

    ``meta_lines`` are the ``##`` lines as read; ``column_line`` is the single
    ``#CHROM`` line. Both are emitted unmodified, with new declarations
    inserted between them.
    """

    meta_lines: list[str] = field(default_factory=list)
    column_line: str = ""
    added: list[InfoDeclaration] = field(default_factory=list)

    def declared_info_ids(self) -> set[str]:
        ids = set()
        for line in self.meta_lines:
            match = _INFO_ID.match(line)
            if match:
                ids.add(match.group(1))
        ids.update(d.id for d in self.added)
        return ids

    def add_info(self, declaration: InfoDeclaration) -> bool:
        """Queue a declaration unless the ID is already declared.

        Returns:
            True if the declaration was added
        """
        if declaration.id in self.declared_info_ids():
            logger.debug("info_declaration_exists", tag=declaration.id)
            return False
        self.added.append(declaration)
        return True

    def lines(self) -> list[str]:
        """All header lines in output order."""
        return (
            list(self.meta_lines)
            + [d.to_meta_line() for d in self.added]
            + [self.column_line]
        )
