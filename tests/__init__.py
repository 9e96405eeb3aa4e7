"""SKINNYSPEC test suite.

Folder taxonomy
- unit/         : Isolated, fast checks of a single module/class/function.
- integration/  : Real interactions with external systems (SQLite, the filesystem).
- functional/   : Controller example groups written with the DSL, run end-to-end.
- e2e/          : The `skinnyspec` command line, invoked through Click's runner.
- helpers/      : Shared utilities and the sample blog app (no tests here).
- fixtures/     : pytest fixture plugins loaded from the root conftest.

General guidance
- Keep unit fast and deterministic (no real I/O); prefer fakes over mocks at boundaries.
- Integration hits a real database with realistic setup/teardown.
- Functional asserts what a DSL user observes: generated examples pass or fail.
- Property-based tests live with the layer they exercise and use @pytest.mark.property.
- Suggested markers: unit, integration, functional, e2e, property, slow
"""
