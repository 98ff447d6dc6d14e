"""Config compiler: turn a chosen template into the final pipeline.

The template is parsed as-is and the environment assignments collected
while resolving the option tree are appended to the app-level env list.
Nothing else in the document changes; duplicate keys are kept and left
for the pipeline executor to deal with.
"""

from __future__ import annotations

from ciseed.exceptions import UnknownConfigError
from ciseed.models.pipeline import EnvItem, PipelineDocument


def compile_config(
    platform: str,
    config_id: str,
    envs: list[EnvItem],
    templates: dict[str, str],
) -> PipelineDocument:
    """Build the pipeline document for ``config_id``.

    Args:
        platform: Platform owning the templates (used in error messages).
        config_id: Config id selected by the resolver.
        envs: Environment assignments, in resolution order.
        templates: The platform's ``{config_id: template text}``.

    Raises:
        UnknownConfigError: If ``config_id`` has no template.
        TemplateError: If the template is not a valid pipeline.
    """
    try:
        template = templates[config_id]
    except KeyError:
        raise UnknownConfigError(
            f"unknown configuration {config_id!r} for platform {platform!r}"
        ) from None
    document = PipelineDocument.from_yaml(template)
    document.add_envs(envs)
    return document
