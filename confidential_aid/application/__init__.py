"""Application layer: ports and the request lifecycle service."""
