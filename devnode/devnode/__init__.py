"""devnode — in-memory Ethereum-style JSON-RPC node for local testing."""
