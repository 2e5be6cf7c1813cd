"""
Unit tests for utilities.py
"""

from unittest import mock

import pytest

from pgdumper.errors import UtilityNotFound
from pgdumper.utilities import Utilities


class TestUtilities:
    def test_override_wins(self):
        utilities = Utilities({"pg_dump": "/opt/pg/bin/pg_dump"})
        with mock.patch("pgdumper.utilities.shutil.which") as which:
            assert utilities.utility("pg_dump") == "/opt/pg/bin/pg_dump"
            which.assert_not_called()

    def test_found_on_path(self):
        with mock.patch("pgdumper.utilities.shutil.which", return_value="/usr/bin/psql"):
            assert Utilities().utility("psql") == "/usr/bin/psql"

    def test_cached(self):
        utilities = Utilities()
        with mock.patch("pgdumper.utilities.shutil.which", return_value="/usr/bin/cat") as which:
            utilities.utility("cat")
            utilities.utility("cat")
        which.assert_called_once_with("cat")

    def test_not_found(self):
        with mock.patch("pgdumper.utilities.shutil.which", return_value=None):
            with pytest.raises(UtilityNotFound) as exc_info:
                Utilities().utility("pg_dumpall")
        assert "pg_dumpall" in str(exc_info.value)
