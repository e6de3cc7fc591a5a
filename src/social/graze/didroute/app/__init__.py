"""
Resolution Service Application Layer

This package exposes the DID resolver over HTTP using the aiohttp framework.

Key Components:
- cli.py: Entry point that configures logging and runs the server
- server.py: Web server setup, shared client session lifecycle, Sentry middleware
- config.py: Configuration management using Pydantic settings, resolver factories
- handlers/: Request handlers

Endpoints:
- /1.0/identifiers/{did}: Resolve a DID, following deactivation redirects
- /internal/alive: Liveness probe

Resolution results map onto HTTP status codes: 200 for an active document,
410 for a deactivated document without successor, 404/400 for resolution
errors carried in the result, 501 for unsupported methods, 502 for rejected
redirects and 504 for hop timeouts.
"""
