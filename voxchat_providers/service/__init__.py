"""Service surfaces of the gateway: HTTP bridge, CLI and dev server."""
