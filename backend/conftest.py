import pytest
from django.test import SimpleTestCase, TransactionTestCase


@pytest.fixture(autouse=True)
def _django_runner_db_semantics(request, django_db_blocker):
    """Match Django's test runner for SimpleTestCase classes.

    pytest-django blocks ``ensure_connection`` globally, which trips channels'
    ``close_old_connections`` housekeeping once an earlier TestCase has opened
    the connection. Django's own runner only guards ``connect``/``cursor`` for
    SimpleTestCase (which still applies), so lift pytest-django's extra block.
    """
    cls = getattr(request, "cls", None)
    if cls is not None and issubclass(cls, SimpleTestCase) and not issubclass(cls, TransactionTestCase):
        with django_db_blocker.unblock():
            yield
    else:
        yield
