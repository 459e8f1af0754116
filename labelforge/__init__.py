"""labelforge -- project/task materialization for labeling projects."""

from labelforge._convert import (
    AttributeIndex,
    build_attribute_index,
    convert_item_to_export,
    convert_item_to_import,
    convert_task_to_export,
    get_max,
)
from labelforge.exceptions import (
    CategoryNotFoundError,
    ExportConversionError,
    FormValidationError,
    ImportConversionError,
    ImproperFormattingError,
    LabelforgeError,
    MissingItemsFileError,
    ProjectExistsError,
    UnknownAttributeError,
    UnsupportedLabelTypeError,
)
from labelforge.file_parser import parse_files
from labelforge.form import parse_form
from labelforge.models import (
    Attribute,
    Category,
    CreationForm,
    FormFileData,
    Item,
    ItemExport,
    Label,
    LabelExport,
    Project,
    ProjectConfig,
    Task,
    TaskStatus,
)
from labelforge.project import (
    create_project,
    create_project_from_upload,
    create_tasks,
    export_project,
    load_tasks,
    save_project,
    save_tasks,
)
from labelforge.storage import FileStorage, StoragePort
from labelforge.task_partition import TaskSlice, partition_items

__all__ = [
    "Attribute",
    "AttributeIndex",
    "Category",
    "CategoryNotFoundError",
    "CreationForm",
    "ExportConversionError",
    "FileStorage",
    "FormFileData",
    "FormValidationError",
    "ImportConversionError",
    "ImproperFormattingError",
    "Item",
    "ItemExport",
    "Label",
    "LabelExport",
    "LabelforgeError",
    "MissingItemsFileError",
    "Project",
    "ProjectConfig",
    "ProjectExistsError",
    "StoragePort",
    "Task",
    "TaskSlice",
    "TaskStatus",
    "UnknownAttributeError",
    "UnsupportedLabelTypeError",
    "build_attribute_index",
    "convert_item_to_export",
    "convert_item_to_import",
    "convert_task_to_export",
    "create_project",
    "create_project_from_upload",
    "create_tasks",
    "export_project",
    "get_max",
    "load_tasks",
    "parse_files",
    "parse_form",
    "partition_items",
    "save_project",
    "save_tasks",
]
