"""Pipeline document model (``bitrise.yml``).

A pipeline document is what a config leaf finally turns into: a format
version, the step library it pulls steps from, a project type tag, an
app-level environment list, a trigger map and named workflows.

Steps are kept as plain one-key mappings (``{"git-clone@4.0.5": {...}}``)
because ciseed never interprets step semantics. The only part of the
document that is ever modified after a scanner produced it is
``app_envs``, where the config compiler appends the answers collected
while resolving the option tree.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import yaml

from ciseed.exceptions import TemplateError
from ciseed.yamlio import dump_yaml, load_yaml

DEFAULT_STEP_LIB_SOURCE = "https://github.com/bitrise-io/bitrise-steplib.git"

StepItem = dict[str, dict[str, Any]]
EnvItem = dict[str, str]


@dataclass
class PipelineDocument:
    """A complete pipeline document.

    Attributes:
        format_version: Pipeline format version string.
        default_step_lib_source: Step library the step ids resolve against.
        project_type: Platform tag (e.g. "android", "ios", "other").
        app_envs: App-level environment assignments, one-key mappings.
        trigger_map: Ordered trigger entries, e.g.
            ``{"push_branch": "*", "workflow": "primary"}``.
        workflows: Workflow name to ordered list of step items.
    """

    format_version: str
    default_step_lib_source: str = DEFAULT_STEP_LIB_SOURCE
    project_type: str = ""
    app_envs: list[EnvItem] = field(default_factory=list)
    trigger_map: list[dict[str, str]] = field(default_factory=list)
    workflows: dict[str, list[StepItem]] = field(default_factory=dict)

    def step_ids(self, workflow: str) -> list[str]:
        """Return the step identifiers of a workflow, without versions.

        Raises:
            KeyError: If the workflow does not exist.
        """
        ids: list[str] = []
        for item in self.workflows[workflow]:
            for reference in item:
                ids.append(reference.split("@", 1)[0])
        return ids

    def add_envs(self, envs: list[EnvItem]) -> None:
        """Append environment assignments, keeping order and duplicates."""
        self.app_envs.extend(dict(env) for env in envs)

    # -- Serialization ------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "format_version": self.format_version,
            "default_step_lib_source": self.default_step_lib_source,
            "project_type": self.project_type,
        }
        if self.app_envs:
            data["app"] = {"envs": [dict(env) for env in self.app_envs]}
        data["trigger_map"] = [dict(trigger) for trigger in self.trigger_map]
        data["workflows"] = {
            name: {"steps": list(steps)} for name, steps in self.workflows.items()
        }
        return data

    def to_yaml(self) -> str:
        return dump_yaml(self.to_dict())

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PipelineDocument:
        """Build a document from parsed template data.

        Raises:
            TemplateError: If required keys are missing or malformed.
        """
        if not isinstance(data, dict):
            raise TemplateError("pipeline template must be a mapping")
        if "format_version" not in data:
            raise TemplateError("pipeline template has no format_version")

        app = data.get("app") or {}
        if not isinstance(app, dict):
            raise TemplateError("'app' must be a mapping")
        envs = app.get("envs") or []
        triggers = data.get("trigger_map") or []
        raw_workflows = data.get("workflows") or {}
        if not isinstance(envs, list) or not isinstance(triggers, list):
            raise TemplateError("'app.envs' and 'trigger_map' must be lists")
        if not isinstance(raw_workflows, dict):
            raise TemplateError("'workflows' must be a mapping")

        workflows: dict[str, list[StepItem]] = {}
        for name, workflow in raw_workflows.items():
            steps = (workflow or {}).get("steps") or []
            if not isinstance(steps, list):
                raise TemplateError(f"steps of workflow {name!r} must be a list")
            workflows[str(name)] = [_normalize_step(name, item) for item in steps]

        return cls(
            format_version=str(data["format_version"]),
            default_step_lib_source=str(
                data.get("default_step_lib_source", DEFAULT_STEP_LIB_SOURCE)
            ),
            project_type=str(data.get("project_type", "")),
            app_envs=[_normalize_env(env) for env in envs],
            trigger_map=[dict(trigger) for trigger in triggers],
            workflows=workflows,
        )

    @classmethod
    def from_yaml(cls, text: str) -> PipelineDocument:
        """Parse template text into a document.

        Raises:
            TemplateError: If the text is not valid YAML or not a pipeline.
        """
        try:
            data = load_yaml(text)
        except yaml.YAMLError as exc:
            raise TemplateError(f"invalid pipeline template: {exc}") from exc
        return cls.from_dict(data)


def _normalize_step(workflow: str, item: Any) -> StepItem:
    if isinstance(item, str):
        return {item: {}}
    if not isinstance(item, dict) or len(item) != 1:
        raise TemplateError(f"malformed step in workflow {workflow!r}: {item!r}")
    reference, body = next(iter(item.items()))
    return {str(reference): dict(body or {})}


def _normalize_env(item: Any) -> EnvItem:
    if not isinstance(item, dict):
        raise TemplateError(f"malformed app env: {item!r}")
    return {str(key): str(value) for key, value in item.items()}
