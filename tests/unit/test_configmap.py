"""Unit tests for ConfigMap data and naming helpers."""

import json
import pytest
import yaml
from unittest.mock import Mock
from kubernetes.client import ApiException
from shipyard.resources import ConfigMapResource
from shipyard.resources.configmap import (
    build_config_map_data,
    config_map_hash,
    config_map_labels,
    legacy_config_map_name,
)
from shipyard.types.models.task import DeploymentTask
from shipyard.utils.errors import NotFoundError, PermanentConfigError


def task(action="full_deploy", version="web-v3"):
    return DeploymentTask(
        id="t-1",
        app_id="a-1",
        env_name="prod",
        cluster_name="prod-a",
        namespace="shop",
        version=version,
        action=action,
        status="init",
        suspend=False,
        retry_count=0,
        project_name="shop",
        app_name="web",
        config_commit_id="c0ffee",
        manual_job_name=None,
    )


def not_found():
    ex = ApiException(status=404, reason="Not Found")
    ex.body = json.dumps({"reason": "NotFound"})
    return ex


@pytest.fixture
def config_maps(registry, resolver, conf):
    resource = ConfigMapResource(registry, "prod-a", "prod", resolver=resolver, conf=conf)
    resource.ops = Mock()
    return resource


class TestConfigMapData:
    """Tests for build_config_map_data and config_map_hash."""

    def test_main_config_is_copied_to_env_file(self):
        data = build_config_map_data("prod", {"config.yaml": "debug: false\n"})
        assert data == {"config.yaml": "debug: false\n", "prod.yaml": "debug: false\n"}

    def test_structured_values_are_dumped(self):
        data = build_config_map_data("prod", {"extra.yaml": {"workers": 4, "name": "웹"}})
        assert yaml.safe_load(data["extra.yaml"]) == {"workers": 4, "name": "웹"}
        assert "웹" in data["extra.yaml"]

    def test_non_mapping_raises(self):
        with pytest.raises(PermanentConfigError):
            build_config_map_data("prod", ["config.yaml"])

    def test_hash_ignores_key_order(self):
        assert config_map_hash({"a": "1", "b": "2"}) == config_map_hash({"b": "2", "a": "1"})
        assert config_map_hash({"a": "1"}) != config_map_hash({"a": "2"})
        assert len(config_map_hash({})) == 32

    def test_labels(self):
        assert config_map_labels(None, "abc") == {"commit": "", "hash": "abc"}


class TestCompatibleName:
    """Tests for the legacy ConfigMap name fallback."""

    def test_new_name_first(self, config_maps):
        config_maps.ops.read.return_value = {"metadata": {"name": "web-v3"}}
        assert config_maps.fetch_compatible(task(), "shop", "web")["metadata"]["name"] == "web-v3"
        config_maps.ops.read.assert_called_once_with("web-v3", "shop")

    def test_falls_back_to_legacy_name(self, config_maps):
        config_maps.ops.read.side_effect = [not_found(), {"metadata": {"name": "shop-web"}}]
        cm = config_maps.fetch_compatible(task(), "shop", "web")
        assert cm["metadata"]["name"] == legacy_config_map_name("shop", "web")

    def test_both_missing_raises(self, config_maps):
        config_maps.ops.read.side_effect = [not_found(), not_found()]
        with pytest.raises(NotFoundError):
            config_maps.fetch_compatible(task(), "shop", "web")

    def test_reload_config_targets_existing_name(self, config_maps):
        config_maps.ops.read.side_effect = [not_found(), {"metadata": {"name": "shop-web"}}]
        assert config_maps.name_for_task(task("reload_config"), "shop", "web") == "shop-web"

    def test_deploy_targets_version_name(self, config_maps):
        assert config_maps.name_for_task(task(), "shop", "web") == "web-v3"
        config_maps.ops.read.assert_not_called()


class TestBuildManifest:
    """Tests for ConfigMapResource.build_manifest."""

    def test_manifest(self, config_maps):
        manifest = config_maps.build_manifest(task(), "shop", "web", {"config.yaml": "a: 1\n"})
        assert manifest["apiVersion"] == "v1"
        assert manifest["metadata"]["name"] == "web-v3"
        labels = manifest["metadata"]["labels"]
        assert labels["project"] == "shop"
        assert labels["app"] == "web"
        assert labels["commit"] == "c0ffee"
        assert labels["hash"] == config_map_hash(manifest["data"])
        assert set(manifest["data"]) == {"config.yaml", "prod.yaml"}
