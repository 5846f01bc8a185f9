"""Exception taxonomy for scaffolding commands.

``UserInputError`` and ``PreconditionError`` abort a command before anything
is written.  ``RenderError`` and ``WriteError`` are raised per output file and
recorded on the ``GenerationResult`` so that the remaining files still get
generated.  Patch problems are never raised; they are reported as
``PatchWarning`` messages.
"""

from __future__ import annotations


class ScaffoldError(Exception):
    """Base class for every error surfaced to the command layer."""

    kind = "ScaffoldError"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"{self.kind}: {message}")


class UserInputError(ScaffoldError):
    """Bad or missing arguments, malformed ``--fields`` / ``--config`` input."""

    kind = "UserInputError"


class MissingRequiredField(UserInputError):
    """A generator was invoked without a context field it needs."""

    kind = "MissingRequiredField"


class PreconditionError(ScaffoldError):
    """The project is not in a state where the command can run."""

    kind = "PreconditionError"


class DependencyNotFound(PreconditionError):
    """A domain (or other prerequisite) has not been generated yet."""

    kind = "DependencyNotFound"


class RenderError(ScaffoldError):
    """The template engine failed to render a template."""

    kind = "TemplateRenderFailure"


class WriteError(ScaffoldError):
    """The file system refused a read or write."""

    kind = "WriteFailure"


class PatchWarning(str):
    """A non-fatal patching problem (missing file or anchor).

    Subclasses ``str`` so warnings can be stored and printed as plain
    messages while still being distinguishable in tests.
    """

    kind = "PatchWarning"
