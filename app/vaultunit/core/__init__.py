"""Transfer engine: path resolution, link index, version gate and pipelines."""

from vaultunit.core.errors import VaultUnitError
from vaultunit.core.exporter import Exporter
from vaultunit.core.importer import Importer
from vaultunit.core.operation import Action, Operation, execute

__all__ = [
    "Action",
    "Exporter",
    "Importer",
    "Operation",
    "VaultUnitError",
    "execute",
]
