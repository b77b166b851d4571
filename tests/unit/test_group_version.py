"""Unit tests for GroupVersion parsing and ordering."""

import pytest
from shipyard.common.models.group_version import GroupVersion, APPS_V1, EXTENSIONS_V1BETA1
from shipyard.common.models.version import ServerVersion
from shipyard.utils.errors import PermanentConfigError


class TestParse:
    """Tests for GroupVersion.parse."""

    def test_group_and_version(self):
        gv = GroupVersion.parse("apps/v1")
        assert gv.group == "apps"
        assert gv.version == "v1"
        assert gv.main_version == 1
        assert gv.phase == ""
        assert gv.test_version == -1

    def test_core_group(self):
        gv = GroupVersion.parse("v1")
        assert gv.group == ""
        assert gv.api_version == "v1"
        assert str(gv) == "v1"

    def test_beta_version(self):
        gv = GroupVersion.parse("autoscaling/v2beta2")
        assert gv.main_version == 2
        assert gv.phase == "beta"
        assert gv.test_version == 2

    @pytest.mark.parametrize(
        "value",
        ["", "a/b/v1", "apps/1", "apps/v0", "apps/v1gamma1", "apps/v1beta0", "apps/v1beta"],
    )
    def test_malformed_values_raise(self, value):
        with pytest.raises(PermanentConfigError):
            GroupVersion.parse(value)

    def test_parse_returns_instances_unchanged(self):
        assert GroupVersion.parse(APPS_V1) is APPS_V1


class TestIsPreferredThan:
    """Tests for GroupVersion.is_preferred_than."""

    def test_anything_beats_nothing(self):
        assert GroupVersion.parse("batch/v1beta1").is_preferred_than(None)

    def test_ga_beats_beta(self):
        assert GroupVersion.parse("batch/v1").is_preferred_than(
            GroupVersion.parse("batch/v1beta1")
        )
        assert not GroupVersion.parse("batch/v1beta1").is_preferred_than(
            GroupVersion.parse("batch/v1")
        )

    def test_beta_beats_alpha(self):
        assert GroupVersion.parse("batch/v2beta1").is_preferred_than(
            GroupVersion.parse("batch/v2alpha1")
        )

    def test_higher_test_version_wins(self):
        assert GroupVersion.parse("autoscaling/v2beta2").is_preferred_than(
            GroupVersion.parse("autoscaling/v2beta1")
        )
        assert not GroupVersion.parse("autoscaling/v2beta1").is_preferred_than(
            GroupVersion.parse("autoscaling/v2beta2")
        )

    def test_higher_main_version_wins(self):
        assert GroupVersion.parse("autoscaling/v2").is_preferred_than(
            GroupVersion.parse("autoscaling/v1")
        )
        assert GroupVersion.parse("autoscaling/v2beta2").is_preferred_than(
            GroupVersion.parse("autoscaling/v1")
        )

    def test_equal_versions_are_not_preferred(self):
        assert not APPS_V1.is_preferred_than(GroupVersion.parse("apps/v1"))

    def test_extensions_ranks_below_other_groups(self):
        assert APPS_V1.is_preferred_than(EXTENSIONS_V1BETA1)
        assert not EXTENSIONS_V1BETA1.is_preferred_than(APPS_V1)

    def test_different_groups_raise(self):
        with pytest.raises(PermanentConfigError):
            APPS_V1.is_preferred_than(GroupVersion.parse("batch/v1"))


class TestServerVersion:
    """Tests for ServerVersion."""

    def test_plus_suffix_is_stripped(self):
        version = ServerVersion("1", "18+")
        assert version.minor == 18
        assert version.major == "1"

    def test_unknown_minor_raises(self):
        with pytest.raises(PermanentConfigError):
            ServerVersion("1", "x")

    def test_from_version_info_dict(self):
        version = ServerVersion.from_version_info(
            {"major": "1", "minor": "16", "gitVersion": "v1.16.9"}
        )
        assert version.minor == 16
        assert version.info.git_version == "v1.16.9"
