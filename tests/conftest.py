import io

import pytest

from ignore_audit.reporting import PlainReporter, set_reporter, set_verbosity


@pytest.fixture(autouse=True)
def _isolated_reporter():
    # The active reporter is process-global; never let one test's stream leak
    # into the next.
    set_reporter(PlainReporter(stream=io.StringIO(), err_stream=io.StringIO()))
    set_verbosity(0)
    yield
    set_reporter(PlainReporter(stream=io.StringIO(), err_stream=io.StringIO()))
    set_verbosity(0)
