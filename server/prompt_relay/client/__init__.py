from prompt_relay.client.project import (
    ProjectSnapshot,
    apply_generation,
    example_project,
    export_project,
    import_project,
    record_error,
)
from prompt_relay.client.request_builder import (
    RelayClient,
    RelayClientError,
    build_analyze_envelope,
    build_generate_envelope,
    load_inline_file,
)
