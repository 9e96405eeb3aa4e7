"""Adapters (outbound and host implementations) for skinnyspec.

Concrete implementations of the interfaces in `skinnyspec.interfaces`:
SQLAlchemy-backed active records and an in-process controller host with its
functional-test harness.

Dependency rule: may import `skinnyspec.domain` and `skinnyspec.interfaces`;
must not import `skinnyspec.helpers`.
"""
