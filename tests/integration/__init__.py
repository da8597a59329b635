"""
Integration tests for the retry layer.

Test components together through a real httpx.AsyncClient:
- Full request chains over httpx.MockTransport (no network)
- Timeout extension observed by the transport
- Body replay, redirects, concurrent chains, cancellation
"""
