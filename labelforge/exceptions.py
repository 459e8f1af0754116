"""Custom exception hierarchy for labelforge.

All library-specific exceptions inherit from ``LabelforgeError`` so consumers
can catch ``except LabelforgeError`` to handle any labelforge failure.
File-read and storage I/O errors are not wrapped and reach the caller as the
original ``OSError``.
"""


class LabelforgeError(Exception):
    """Base exception for all labelforge errors."""


class InteractiveModeRequiredError(LabelforgeError):
    """Raised when interactive input is needed but disabled."""


class FormValidationError(LabelforgeError):
    """Raised when a required creation form field is missing or invalid."""


class ProjectExistsError(LabelforgeError):
    """Raised when the requested project name is already taken."""

    def __init__(self, project_name: str) -> None:
        """Initialize with the conflicting project name."""
        self.project_name = project_name
        super().__init__("Project name already exists.")


class MissingItemsFileError(LabelforgeError):
    """Raised when no items file was uploaded."""


class ImproperFormattingError(LabelforgeError):
    """Raised when an uploaded file cannot be parsed into the expected shape."""


class ImportConversionError(LabelforgeError):
    """Raised when an imported item cannot be converted to internal form."""


class CategoryNotFoundError(ImportConversionError):
    """Raised when a category name path does not resolve in the category tree."""

    def __init__(self, category_path: list[str], missing: str, depth: int) -> None:
        """Initialize with the full path and the first unmatched name."""
        self.category_path = category_path
        self.missing = missing
        self.depth = depth
        super().__init__(
            f"Category {missing!r} not found at depth {depth} "
            f"of path {category_path!r}."
        )


class UnknownAttributeError(ImportConversionError):
    """Raised when a label references an attribute absent from the config."""

    def __init__(self, attribute_name: str, available: list[str]) -> None:
        """Initialize with the unknown name and the configured names."""
        self.attribute_name = attribute_name
        self.available = available
        super().__init__(
            f"Attribute {attribute_name!r} is not defined. "
            f"Available attributes: {', '.join(available) or '(none)'}."
        )


class UnsupportedLabelTypeError(LabelforgeError):
    """Raised when a label type has no shape mapping in the export schema."""


class ExportConversionError(LabelforgeError):
    """Raised when a stored label does not resolve against the project config."""
