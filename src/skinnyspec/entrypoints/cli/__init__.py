"""The ``skinnyspec`` command-line interface."""
