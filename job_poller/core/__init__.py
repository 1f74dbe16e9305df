"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: Named defaults for polling and the receipt API
- exceptions: Structured exception taxonomy
"""
