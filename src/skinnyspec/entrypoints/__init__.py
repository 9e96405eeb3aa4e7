"""Entrypoints (inbound adapters) for skinnyspec.

Expose the DSL to the outside world: the ``skinnyspec`` command line. Parse
and validate inputs, call into the domain and helpers, and present results.

Dependency rule: may import `skinnyspec.domain` and `skinnyspec.helpers`;
avoid importing `skinnyspec.adapters` directly.
"""
