"""
Framework selection for the shadcn/ui MCP server.

The active framework (react, svelte, vue or react-native) is picked from the
``--framework``/``-f`` command line flag, then the ``FRAMEWORK`` environment
variable, then the ``react`` default. React additionally supports a UI
library variant (``--ui-library`` / ``UI_LIBRARY``): Radix UI or Base UI.

Both values are resolved once per ``FrameworkResolver`` and frozen afterwards.
"""

import logging
import os
import sys
import threading
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class Framework(str, Enum):
    REACT = "react"
    SVELTE = "svelte"
    VUE = "vue"
    REACT_NATIVE = "react-native"


class UiLibrary(str, Enum):
    RADIX = "radix"
    BASE = "base"


DEFAULT_FRAMEWORK = Framework.REACT
DEFAULT_UI_LIBRARY = UiLibrary.RADIX

FRAMEWORK_FLAGS = ("--framework", "-f")
UI_LIBRARY_FLAG = "--ui-library"
FRAMEWORK_ENV = "FRAMEWORK"
UI_LIBRARY_ENV = "UI_LIBRARY"

_UI_LIBRARY_LABELS = {
    UiLibrary.RADIX: "Radix UI",
    UiLibrary.BASE: "Base UI",
}


@dataclass(frozen=True, slots=True)
class FrameworkInfo:
    """Descriptive details about a framework, used by help and diagnostics."""

    current: Framework
    repository: str
    file_extension: str
    description: str

    def as_dict(self) -> dict[str, str]:
        return {
            "current": self.current.value,
            "repository": self.repository,
            "fileExtension": self.file_extension,
            "description": self.description,
        }


_FRAMEWORK_INFO: dict[Framework, tuple[str, str, str]] = {
    Framework.REACT: ("shadcn-ui/ui", ".tsx", "React components from shadcn/ui v4"),
    Framework.SVELTE: ("huntabyte/shadcn-svelte", ".svelte", "Svelte components from shadcn-svelte"),
    Framework.VUE: ("unovue/shadcn-vue", ".vue", "Vue components from shadcn-vue"),
    Framework.REACT_NATIVE: (
        "founded-labs/react-native-reusables",
        ".tsx",
        "React Native components from react-native-reusables",
    ),
}


def describe_framework(framework: Framework) -> FrameworkInfo:
    """Return the repository, file extension and description for a framework."""
    repository, file_extension, description = _FRAMEWORK_INFO[framework]
    return FrameworkInfo(
        current=framework,
        repository=repository,
        file_extension=file_extension,
        description=description,
    )


def _parse_framework(value: str | None) -> Framework | None:
    if not value:
        return None
    try:
        return Framework(value.strip().lower())
    except ValueError:
        return None


def _parse_ui_library(value: str | None) -> UiLibrary | None:
    if not value:
        return None
    try:
        return UiLibrary(value.strip().lower())
    except ValueError:
        return None


def _flag_value(argv: Sequence[str], flags: Sequence[str]) -> str | None:
    """Return the argument following the first occurrence of any flag."""
    for index, arg in enumerate(argv):
        if arg in flags:
            if index + 1 < len(argv) and argv[index + 1]:
                return argv[index + 1]
            return None
    return None


class FrameworkResolver:
    """Resolve and memoize the active framework and UI library.

    Construct one instance at startup and inject it wherever the selection is
    needed. ``argv`` and ``environ`` are read on first resolution only; later
    changes to either are not observed.
    """

    def __init__(
        self,
        argv: Sequence[str] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._argv = argv if argv is not None else sys.argv[1:]
        self._environ = environ if environ is not None else os.environ
        self._lock = threading.RLock()
        self._framework: Framework | None = None
        self._ui_library: UiLibrary | None = None

    def resolve_framework(self) -> Framework:
        if self._framework is not None:
            return self._framework
        with self._lock:
            if self._framework is None:
                self._framework = self._compute_framework()
            return self._framework

    def resolve_ui_library(self) -> UiLibrary:
        if self._ui_library is not None:
            return self._ui_library
        with self._lock:
            if self._ui_library is None:
                self._ui_library = self._compute_ui_library()
            return self._ui_library

    def framework_info(self) -> FrameworkInfo:
        return describe_framework(self.resolve_framework())

    def _compute_framework(self) -> Framework:
        arg_value = _flag_value(self._argv, FRAMEWORK_FLAGS)
        if arg_value is not None:
            framework = _parse_framework(arg_value)
            if framework is not None:
                logger.info("Framework set to '%s' via command line argument", framework.value)
                return framework
            logger.warning(
                "Invalid framework '%s' specified. Using default '%s'",
                arg_value.lower(),
                DEFAULT_FRAMEWORK.value,
            )

        framework = _parse_framework(self._environ.get(FRAMEWORK_ENV))
        if framework is not None:
            logger.info("Framework set to '%s' via environment variable", framework.value)
            return framework

        logger.info("Using default framework: '%s'", DEFAULT_FRAMEWORK.value)
        return DEFAULT_FRAMEWORK

    def _compute_ui_library(self) -> UiLibrary:
        framework = self.resolve_framework()
        arg_value = _flag_value(self._argv, (UI_LIBRARY_FLAG,))
        env_value = (self._environ.get(UI_LIBRARY_ENV) or "").strip() or None

        if framework is not Framework.REACT:
            requested = arg_value or env_value
            if requested:
                logger.warning(
                    "--ui-library is only supported for React. Ignoring '%s' for %s.",
                    requested.lower(),
                    framework.value,
                )
            return DEFAULT_UI_LIBRARY

        if arg_value is not None:
            ui_library = _parse_ui_library(arg_value)
            if ui_library is not None:
                logger.info("UI library set to '%s' via command line argument", ui_library.value)
                return ui_library
            logger.warning(
                "Invalid UI library '%s'. Using default '%s'",
                arg_value.lower(),
                DEFAULT_UI_LIBRARY.value,
            )

        ui_library = _parse_ui_library(env_value)
        if ui_library is not None:
            logger.info("UI library set to '%s' via environment variable", ui_library.value)
            return ui_library

        logger.info("Using default UI library: '%s'", DEFAULT_UI_LIBRARY.value)
        return DEFAULT_UI_LIBRARY


def validate_framework_selection(resolver: FrameworkResolver) -> None:
    """Log the resolved configuration and how to switch to another framework."""
    framework = resolver.resolve_framework()
    info = describe_framework(framework)

    logger.info("MCP Server configured for %s framework", framework.value.upper())
    logger.info("Repository: %s", info.repository)
    logger.info("File extension: %s", info.file_extension)
    logger.info("Description: %s", info.description)

    if framework is Framework.REACT:
        ui_library = resolver.resolve_ui_library()
        logger.info("UI library: %s (%s)", ui_library.value, _UI_LIBRARY_LABELS[ui_library])

    others = "|".join(f.value for f in Framework if f is not framework)
    logger.info(
        "To switch frameworks: set %s=%s or use --framework %s",
        FRAMEWORK_ENV,
        others,
        others,
    )
