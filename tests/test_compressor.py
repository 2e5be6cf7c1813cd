"""
Unit tests for compressor.py
"""

import pytest

from pgdumper.compressor import Bzip2, Custom, Gzip, compressor_from_config
from pgdumper.errors import ConfigError


def collect(compressor):
    calls = []
    compressor.compress_with(lambda command, ext: calls.append((command, ext)))
    return calls


class TestGzip:
    def test_default(self, utilities):
        assert collect(Gzip(utilities)) == [("/usr/bin/gzip", ".gz")]

    def test_level_and_rsyncable(self, utilities):
        assert collect(Gzip(utilities, level=9, rsyncable=True)) == [("/usr/bin/gzip --rsyncable -9", ".gz")]

    @pytest.mark.parametrize("level", [0, 10])
    def test_invalid_level(self, utilities, level):
        with pytest.raises(ConfigError):
            Gzip(utilities, level=level)


class TestBzip2:
    def test_default(self, utilities):
        assert collect(Bzip2(utilities)) == [("/usr/bin/bzip2", ".bz2")]

    def test_level(self, utilities):
        assert collect(Bzip2(utilities, level=1)) == [("/usr/bin/bzip2 -1", ".bz2")]


class TestCustom:
    def test_resolves_binary(self, utilities):
        utilities.overrides["xz"] = "/opt/bin/xz"
        assert collect(Custom(utilities, "xz -T0", ".xz")) == [("/opt/bin/xz -T0", ".xz")]

    def test_extension_gets_dot(self, utilities):
        utilities.overrides["zstd"] = "/usr/bin/zstd"
        assert collect(Custom(utilities, "zstd", "zst")) == [("/usr/bin/zstd", ".zst")]

    def test_requires_command_and_extension(self, utilities):
        with pytest.raises(ConfigError):
            Custom(utilities, "", ".xz")
        with pytest.raises(ConfigError):
            Custom(utilities, "xz", "")


class TestCompressorFromConfig:
    def test_disabled(self, utilities):
        assert compressor_from_config({}, utilities) is None

    def test_gzip(self, utilities):
        compressor = compressor_from_config({"type": "gzip", "level": 6}, utilities)
        assert isinstance(compressor, Gzip)
        assert compressor.level == 6

    def test_bzip2_case_insensitive(self, utilities):
        assert isinstance(compressor_from_config({"type": "Bzip2"}, utilities), Bzip2)

    def test_custom(self, utilities):
        compressor = compressor_from_config(
            {"type": "custom", "command": "xz", "extension": ".xz"}, utilities
        )
        assert isinstance(compressor, Custom)

    def test_unknown(self, utilities):
        with pytest.raises(ConfigError) as exc_info:
            compressor_from_config({"type": "rar"}, utilities)
        assert "rar" in str(exc_info.value)
