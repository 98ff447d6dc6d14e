"""Pipeline template builders shared by the platform scanners.

Every generated pipeline starts with the same three preparation steps
(SSH key, clone, free-form script) and ends with the deploy step; the
platform scanners only decide what goes in between.
"""

from __future__ import annotations

from ciseed.models.pipeline import EnvItem, PipelineDocument, StepItem
from ciseed.steps.catalog import StepCatalog

SSH_KEY_RUN_IF = '{{getenv "SSH_RSA_PRIVATE_KEY" | ne ""}}'
SCRIPT_TITLE = "Do anything with Script step"

PRIMARY_WORKFLOW = "primary"
DEPLOY_WORKFLOW = "deploy"


def prepare_steps(catalog: StepCatalog) -> list[StepItem]:
    """Return the steps every workflow starts with."""
    return [
        catalog.step("activate-ssh-key", run_if=SSH_KEY_RUN_IF),
        catalog.step("git-clone"),
        catalog.step("script", title=SCRIPT_TITLE),
    ]


def deploy_step(catalog: StepCatalog) -> StepItem:
    return catalog.step("deploy-to-bitrise-io")


def default_trigger_map() -> list[dict[str, str]]:
    return [
        {"push_branch": "*", "workflow": PRIMARY_WORKFLOW},
        {"pull_request_source_branch": "*", "workflow": PRIMARY_WORKFLOW},
    ]


def build_pipeline(
    catalog: StepCatalog,
    project_type: str,
    primary_steps: list[StepItem],
    deploy_steps: list[StepItem] | None = None,
    app_envs: list[EnvItem] | None = None,
) -> PipelineDocument:
    """Assemble a pipeline document.

    ``primary_steps`` (and ``deploy_steps``, when given) are the
    platform-specific steps; preparation and deploy steps are wrapped
    around them here. Workflows are ordered ``deploy`` before ``primary``.
    """
    workflows: dict[str, list[StepItem]] = {}
    if deploy_steps is not None:
        workflows[DEPLOY_WORKFLOW] = (
            prepare_steps(catalog) + list(deploy_steps) + [deploy_step(catalog)]
        )
    workflows[PRIMARY_WORKFLOW] = (
        prepare_steps(catalog) + list(primary_steps) + [deploy_step(catalog)]
    )
    return PipelineDocument(
        format_version=catalog.format_version,
        default_step_lib_source=catalog.step_lib_source,
        project_type=project_type,
        app_envs=list(app_envs or []),
        trigger_map=default_trigger_map(),
        workflows=workflows,
    )


def render_pipeline(
    catalog: StepCatalog,
    project_type: str,
    primary_steps: list[StepItem],
    deploy_steps: list[StepItem] | None = None,
    app_envs: list[EnvItem] | None = None,
) -> str:
    """Build a pipeline with ``build_pipeline`` and return its YAML text."""
    return build_pipeline(
        catalog,
        project_type,
        primary_steps,
        deploy_steps=deploy_steps,
        app_envs=app_envs,
    ).to_yaml()
