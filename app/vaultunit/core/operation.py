"""Operation driver: route an invocation context to a pipeline.

The invocation context is a mapping::

    {
        "home": {
            "options": {"overwrite": true},        # per-call options
            "data": ["path", {"path": "...", "required": true}],
            "bin": "path",
        },
        "options": {"overwrite": false},           # global options
    }

Each data type under "home" is resolved into path items and handed to
the export or import pipeline, one data type after another.
"""

import logging
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any

from vaultunit.core.errors import (
    HomeDirMissingError,
    InvalidPathSpecError,
    UnknownActionError,
    UnknownContextItemError,
    VaultUnitError,
)
from vaultunit.core.exporter import Exporter
from vaultunit.core.importer import Importer
from vaultunit.core.resolver import resolve_items
from vaultunit.core.settings import UnitSettings
from vaultunit.core.vault import OPTIONS_KEY, TransferEnvironment, parse_options
from vaultunit.filesystem.copy import CopyService
from vaultunit.models.item import PathItem

logger = logging.getLogger(__name__)

HOME_KEY = "home"

# Exit statuses of execute()
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CRASH = 2


class Action(str, Enum):
    """Transfer direction selected by the caller."""

    EXPORT = "export"
    IMPORT = "import"

    @classmethod
    def parse(cls, name: "str | Action") -> "Action":
        """Look up an action by name.

        Raises:
            UnknownActionError: If the name is not a known action.
        """
        try:
            return cls(name)
        except ValueError:
            raise UnknownActionError("Unknown action", action=name) from None


class Operation:
    """Runs one export or import over an invocation context.

    Attributes:
        home: Canonical home directory.
        vault_dirs: Vault directory registered per data type.
    """

    def __init__(
        self,
        home: str,
        vault_dirs: Mapping[str, str],
        settings: UnitSettings | None = None,
        copier: CopyService | None = None,
    ) -> None:
        """Initialize the Operation.

        Args:
            home: Home directory (canonicalized here).
            vault_dirs: Vault directory per data type, e.g.
                {"data": "/vault/data", "bin": "/vault/bin"}.
            settings: Transfer settings. Defaults to built-in values.
            copier: Filesystem primitives.
        """
        self._copier = copier or CopyService()
        self._settings = settings or UnitSettings()
        self.home = self._copier.canonicalize(home) if home else home
        self.vault_dirs = {name: path for name, path in vault_dirs.items() if path}

    def environment(self, options: Any = None) -> TransferEnvironment:
        """Build the pipeline environment with the given global options."""
        return TransferEnvironment(
            home=self.home,
            vault_dirs=self.vault_dirs,
            settings=self._settings,
            copier=self._copier,
            options=parse_options(options),
        )

    def export(
        self,
        data_type: str,
        items: Sequence[PathItem],
        location: Mapping[str, Any] | None = None,
        options: Any = None,
    ) -> list[PathItem]:
        """Export items of one data type into its vault directory."""
        return Exporter(self.environment(options)).export(data_type, items, location)

    def import_items(
        self,
        data_type: str,
        items: Sequence[PathItem],
        location: Mapping[str, Any] | None = None,
        options: Any = None,
    ) -> list[PathItem]:
        """Import items of one data type from its vault directory."""
        return Importer(self.environment(options)).import_items(data_type, items, location)

    def execute(
        self,
        context: Mapping[str, Any],
        action: "str | Action",
    ) -> dict[str, list[PathItem]]:
        """Run an action over every data type of the context.

        Args:
            context: Invocation context (see module docstring).
            action: "export" or "import".

        Returns:
            Transferred items per data type, in processing order.

        Raises:
            HomeDirMissingError: If the home directory does not exist.
            UnknownActionError: If the action is unknown.
            UnknownContextItemError: If the context has an unexpected key.
            VaultUnitError: Any error of the pipelines.
        """
        logger.debug("Unit execute, action %s, context %s", action, context)
        if not self._copier.is_dir(self.home):
            raise HomeDirMissingError("Home dir doesn't exist", dir=self.home)

        selected = Action.parse(action)

        for name in context:
            if name not in (HOME_KEY, OPTIONS_KEY):
                raise UnknownContextItemError("Unknown context item", item=name)

        env = self.environment(context.get(OPTIONS_KEY))
        if selected == Action.EXPORT:
            run = Exporter(env).export
        else:
            run = Importer(env).import_items

        location = context.get(HOME_KEY) or {}
        if not isinstance(location, Mapping):
            raise InvalidPathSpecError("Home entry must be a mapping", item=location)

        transferred: dict[str, list[PathItem]] = {}
        for data_type, value in location.items():
            if data_type == OPTIONS_KEY:
                continue
            items = resolve_items(value, self.home)
            transferred[data_type] = run(data_type, items, location)
        return transferred


def execute(
    context: Mapping[str, Any],
    *,
    action: "str | Action",
    home: str,
    vault_dirs: Mapping[str, str],
    settings: UnitSettings | None = None,
) -> int:
    """Run an operation and report the outcome as an exit status.

    Returns:
        EXIT_OK on success, EXIT_FAILURE for a transfer error,
        EXIT_CRASH for any other exception.
    """
    try:
        Operation(home, vault_dirs, settings).execute(context, action)
    except VaultUnitError as e:
        logger.error("%s", e)
        return EXIT_FAILURE
    except Exception:
        logger.exception("Unexpected failure during %s", action)
        return EXIT_CRASH
    return EXIT_OK
