"""Exceptions raised while loading, patching and generating."""


class CodegenError(Exception):
    """Base class for every failure that aborts a generation run."""


class SchemaError(CodegenError):
    """The schema document is missing, unreadable or structurally invalid."""


class PatchError(CodegenError):
    """A doc patch rule no longer matches the schema it is applied to.

    The rule table is stale and has to be fixed by hand.
    """


class AmbiguousPrefixError(CodegenError):
    """Two generic parameters of a method ended up with the same name."""
