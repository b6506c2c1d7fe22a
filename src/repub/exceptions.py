"""Error types raised while building a book."""


class RepubError(Exception):
    """Base error for predictable, user-facing build failures.

    The CLI catches this and prints a concise message without a traceback.
    """


class InvalidInputPath(RepubError):
    """Input path is missing, is not a .md file, or holds no Markdown files."""


class IOFailure(RepubError):
    """Reading, writing, creating or removing a file failed during a build."""


class MalformedHeadingQuery(RepubError):
    """The heading selector or the rendered document could not be parsed."""
