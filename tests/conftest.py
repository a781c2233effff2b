"""Pytest configuration and fixtures shared by all toolpack tests."""

import sys

import pytest


@pytest.fixture(autouse=True)
def isolate_output_globals():
    """Point output.py at the current (captured) stdout and restore its globals afterwards.

    output.py binds its stream and verbosity at module level, so without this
    one test's settings leak into the next.
    """
    from toolpack import output

    original_start_time = output._start_time
    original_output_stream = output._output_stream
    original_verbose = output._verbose

    output._output_stream = sys.stdout
    output._verbose = False

    yield

    output._start_time = original_start_time
    output._output_stream = original_output_stream
    output._verbose = original_verbose
