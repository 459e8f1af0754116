"""String constants shared across the labelforge pipeline.

Values match what creation forms send and what persisted task documents
contain, so they must not be renamed.
"""

from __future__ import annotations

from typing import Literal

# ------------------------------------------------------------------
# Item types
# ------------------------------------------------------------------

ITEM_IMAGE = "image"
ITEM_VIDEO = "video"
ITEM_POINT_CLOUD = "pointcloud"
ITEM_POINT_CLOUD_TRACKING = "pointcloudtracking"

# ------------------------------------------------------------------
# Label types
# ------------------------------------------------------------------

LABEL_EMPTY = "empty"
LABEL_TAG = "tag"
LABEL_BOX_2D = "box2d"
LABEL_POLYGON_2D = "polygon2d"
LABEL_POLYLINE_2D = "polyline2d"
LABEL_BOX_3D = "box3d"

# ------------------------------------------------------------------
# Shape types (``IndexedShape.type``)
# ------------------------------------------------------------------

SHAPE_RECT = "rect"
SHAPE_POLYGON_2D = "polygon2d"
SHAPE_CUBE = "cube"

ShapeTypeName = Literal["rect", "polygon2d", "cube"]

# ------------------------------------------------------------------
# Attribute tool types
# ------------------------------------------------------------------

TOOL_SWITCH = "switch"
TOOL_LIST = "list"
TOOL_LONG_LIST = "longList"

AttributeToolType = Literal["switch", "list", "longList", ""]

# ------------------------------------------------------------------
# Frontend handlers and bundles
# ------------------------------------------------------------------

HANDLER_LABEL = "label"
HANDLER_INVALID = "NA"

BUNDLE_V1 = "image.js"
BUNDLE_V2 = "image_v2.js"

# ------------------------------------------------------------------
# Creation form field names
# ------------------------------------------------------------------

FIELD_PROJECT_NAME = "project_name"
FIELD_ITEM_TYPE = "item_type"
FIELD_LABEL_TYPE = "label_type"
FIELD_PAGE_TITLE = "page_title"
FIELD_TASK_SIZE = "task_size"
FIELD_INSTRUCTIONS_URL = "instructions"
FIELD_DEMO_MODE = "demo_mode"

FILE_ITEMS = "item_file"
FILE_CATEGORIES = "categories"
FILE_ATTRIBUTES = "attributes"

TASK_ID_WIDTH = 6
