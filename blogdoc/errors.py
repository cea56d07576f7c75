"""Parse errors for blog post documents.

Every error is scoped to a single document. ``source`` names the document
(usually its file path) and ``line`` is the 1-based line in the whole
document where the problem was found, when known.
"""


class PostParseError(ValueError):
    """Base class for all document parse failures."""

    def __init__(
        self, message: str, *, source: str | None = None, line: int | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.source = source
        self.line = line

    def __str__(self) -> str:
        location = self.source or "<document>"
        if self.line is not None:
            location = f"{location}:{self.line}"
        return f"{location}: {self.message}"

    def with_location(
        self, *, source: str | None = None, line_offset: int = 0
    ) -> "PostParseError":
        """Attach the document source and shift the line into document coordinates."""
        if source is not None and self.source is None:
            self.source = source
        if self.line is not None:
            self.line += line_offset
        return self


class MissingFieldError(PostParseError):
    """A required front-matter field (``title`` or ``date``) is absent."""

    def __init__(self, field: str, **kwargs) -> None:
        super().__init__(f"missing required field '{field}'", **kwargs)
        self.field = field


class MalformedDateError(PostParseError):
    """A timestamp could not be parsed together with its UTC offset."""

    def __init__(self, field: str, value: object, **kwargs) -> None:
        super().__init__(
            f"cannot parse '{field}' value {value!r} as a timestamp with UTC offset",
            **kwargs,
        )
        self.field = field
        self.value = value


class UnterminatedBlockError(PostParseError):
    """A code fence, embed directive or front-matter block is never closed."""

    def __init__(self, kind: str, **kwargs) -> None:
        super().__init__(f"unterminated {kind}", **kwargs)
        self.kind = kind


class UnresolvableMediaReferenceError(PostParseError):
    """An image or video path cannot be resolved against ``media_subpath``."""

    def __init__(
        self, path: str, media_subpath: str | None, reason: str | None = None, **kwargs
    ) -> None:
        if reason:
            message = reason
        elif media_subpath:
            message = f"media reference {path!r} cannot be resolved under {media_subpath!r}"
        else:
            message = f"media reference {path!r} is relative but no media_subpath is set"
        super().__init__(message, **kwargs)
        self.path = path
        self.media_subpath = media_subpath


class InvalidFrontMatterError(PostParseError):
    """The front-matter block is not a YAML mapping."""


class SlugConflictError(PostParseError):
    """A post's file name yields no URL slug, or one another post already uses."""

    def __init__(self, slug: str, taken_by: str | None = None, **kwargs) -> None:
        if taken_by:
            message = f"slug {slug!r} is already used by {taken_by}"
        else:
            message = "file name does not yield a URL slug"
        super().__init__(message, **kwargs)
        self.slug = slug
        self.taken_by = taken_by
