"""Unit tests for JobTemplate rendering."""

import pytest

from resetbench.core.template import JobTemplate
from resetbench.errors import ConfigurationError, TemplateError

from .conftest import TEMPLATE_TEXT


def test_render_substitutes_node_and_threshold(template):
    manifest = template.render("gpu-node-a", "-1", "gpu-reset-100-batch-2-")
    pod_spec = manifest["spec"]["template"]["spec"]
    assert pod_spec["nodeSelector"]["kubernetes.io/hostname"] == "gpu-node-a"
    env = pod_spec["containers"][0]["env"][0]
    assert env == {"name": "RESET_THRESHOLD_DAYS", "value": "-1"}


def test_render_overrides_generate_name(template):
    manifest = template.render("gpu-node-a", "-1", "gpu-reset-100-batch-2-")
    assert manifest["metadata"]["generateName"] == "gpu-reset-100-batch-2-"
    assert "name" not in manifest["metadata"]


def test_render_drops_fixed_name():
    text = TEMPLATE_TEXT.replace("generateName: gpu-reset-manual-job-", "name: fixed-job")
    manifest = JobTemplate(text).render("n1", "7", "gpu-reset-1-batch-1-")
    assert "name" not in manifest["metadata"]
    assert manifest["metadata"]["generateName"] == "gpu-reset-1-batch-1-"


def test_render_merges_labels(template):
    manifest = template.render(
        "gpu-node-a", "-1", "p-", labels={"gpu-reset/node": "gpu-node-a"},
    )
    assert manifest["metadata"]["labels"] == {
        "app": "gpu-reset",
        "gpu-reset/node": "gpu-node-a",
    }


def test_each_render_is_independent(template):
    first = template.render("gpu-node-a", "-1", "p-1-")
    second = template.render("gpu-node-b", "-1", "p-2-")
    assert first["metadata"]["generateName"] == "p-1-"
    assert second["spec"]["template"]["spec"]["nodeSelector"]["kubernetes.io/hostname"] == "gpu-node-b"


def test_load_missing_file(tmp_path):
    with pytest.raises(TemplateError, match="not found"):
        JobTemplate.load(str(tmp_path / "absent.yaml"))


def test_template_error_is_configuration_error(tmp_path):
    with pytest.raises(ConfigurationError):
        JobTemplate.load(str(tmp_path / "absent.yaml"))


def test_load_reads_file(tmp_path):
    path = tmp_path / "job.yaml"
    path.write_text(TEMPLATE_TEXT)
    template = JobTemplate.load(str(path))
    assert template.source == str(path)
    assert template.render("n", "0", "p-")["kind"] == "Job"


def test_invalid_yaml():
    with pytest.raises(TemplateError, match="invalid YAML"):
        JobTemplate("kind: Job\nmetadata: [unclosed\n").render("n", "0", "p-")


def test_non_job_document():
    with pytest.raises(TemplateError, match="Job document"):
        JobTemplate("apiVersion: v1\nkind: Pod\n").render("n", "0", "p-")
