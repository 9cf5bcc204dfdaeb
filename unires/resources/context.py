"""Lookup context for embedded package assets."""

import importlib.resources
import logging
from importlib.resources.abc import Traversable

from pydantic import BaseModel, ConfigDict, Field

from .paths import FOLDER_SEPARATOR

logger = logging.getLogger(__name__)


class LookupContext(BaseModel):
    """Namespace that resolves embedded-asset names to package data.

    With an ``anchor`` package, names resolve inside that package. Without
    one, the first segment of a name is the top-level package and the rest
    is looked up inside it, so ``"email/mime/text.py"`` names the ``mime/text.py``
    asset of the ``email`` package.
    """

    model_config = ConfigDict(frozen=True)

    anchor: str | None = Field(
        default=None, description="Package that names are relative to"
    )

    def locate(self, name: str) -> Traversable | None:
        """Find the traversable for an asset name.

        Returns ``None`` when the package part of the name cannot be
        imported. The returned traversable may still point at nothing.
        """
        name = name.strip(FOLDER_SEPARATOR)
        if self.anchor:
            package, remainder = self.anchor, name
        else:
            package, _, remainder = name.partition(FOLDER_SEPARATOR)
            if not package:
                return None

        try:
            root = importlib.resources.files(package)
        except Exception as e:
            # importing the package runs its code, which may fail in any way
            logger.debug("No package %r for asset %r: %s", package, name, e)
            return None

        if not remainder:
            return root
        return root.joinpath(*remainder.split(FOLDER_SEPARATOR))

    def describe(self) -> str:
        if self.anchor:
            return f"package '{self.anchor}'"
        return "top-level packages"
