from .common import (
    exit_with_message,
    load_event_values,
    parse_row_spec,
    read_csv_responses,
    write_json_outputs,
)

from .handlers import (
    handle_create,
    handle_header,
    handle_notifications_test,
    handle_submit,
)

__all__ = [
    "exit_with_message",
    "load_event_values",
    "parse_row_spec",
    "read_csv_responses",
    "write_json_outputs",
    "handle_create",
    "handle_header",
    "handle_notifications_test",
    "handle_submit",
]
