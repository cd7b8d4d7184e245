"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: Named constants shared by activities and the HTTP layer
- exceptions: Custom exception hierarchy
- ingress: Upload validation at the HTTP boundary
"""
