"""
Tests for configs.py command-line parsing.
"""
import pytest


class TestFromArgs:
    def test_default_port(self):
        from configs import Configs

        configs = Configs.from_args([])

        assert configs.port == 5000
        assert configs.address == ("", 5000)
        assert configs.default_name == "Anonymous"

    def test_positional_port(self):
        from configs import Configs

        assert Configs.from_args(["6000"]).port == 6000

    @pytest.mark.parametrize("value", ["abc", "70000", "-1", "5.5"])
    def test_invalid_port_is_fatal(self, value):
        from configs import Configs

        with pytest.raises(SystemExit) as excinfo:
            Configs.from_args([value])
        assert excinfo.value.code == 2

    def test_rejects_extra_arguments(self):
        from configs import Configs

        with pytest.raises(SystemExit):
            Configs.from_args(["5000", "6000"])
