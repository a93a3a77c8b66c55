"""Router error codes (machine-readable).

Error codes follow SUBJECT_REASON naming convention and are carried by every
startup error so failures can be matched without parsing messages.

Categories:
- Document errors (SPEC_*)
- Controller binding errors (CONTROLLER_*, OPERATION_HANDLER_*)
- Multipart body errors (MULTIPART_*)
- Path template errors (PATH_*)
"""

from enum import Enum


class ErrorCode(Enum):
    """Router error codes (machine-readable)."""

    # Document errors
    SPEC_FILE_UNREADABLE = "spec_file_unreadable"
    SPEC_PARSE_FAILED = "spec_parse_failed"
    SPEC_STRUCTURE_INVALID = "spec_structure_invalid"
    SPEC_REF_UNRESOLVABLE = "spec_ref_unresolvable"
    SPEC_REF_CIRCULAR = "spec_ref_circular"
    SPEC_SCHEMA_INVALID = "spec_schema_invalid"
    SPEC_DUPLICATE_OPERATION_ID = "spec_duplicate_operation_id"

    # Controller binding errors
    CONTROLLER_NOT_DECLARED = "controller_not_declared"
    CONTROLLER_MODULE_NOT_FOUND = "controller_module_not_found"
    OPERATION_ID_MISSING = "operation_id_missing"
    OPERATION_HANDLER_NOT_FOUND = "operation_handler_not_found"
    OPERATION_HANDLER_NOT_CALLABLE = "operation_handler_not_callable"

    # Multipart body errors
    MULTIPART_PROPERTY_COUNT = "multipart_property_count"
    MULTIPART_PROPERTY_TYPE_MISSING = "multipart_property_type_missing"
    MULTIPART_PROPERTY_FORMAT_MISSING = "multipart_property_format_missing"

    # Path template errors
    PATH_PARAMETER_UNDECLARED = "path_parameter_undeclared"
