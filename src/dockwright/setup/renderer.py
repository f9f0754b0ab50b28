"""Workflow template rendering.

One pure function per deployment mode turns a WorkflowConfig into the YAML
documents to write plus a run summary. Templates are Jinja2 files shipped in
``dockwright/setup/templates``. GitHub Actions expressions use ``${{ }}``, so
the environment uses ``<< >>`` for variables and ``<% %>`` for blocks and
leaves every ``${{ }}`` untouched.

Rendering has no side effects and no timestamps: the same config always
yields byte-identical output.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

import yaml
from jinja2 import (
    Environment,
    PackageLoader,
    StrictUndefined,
    TemplateError,
    TemplateNotFound,
)

from dockwright.constants import (
    BUILD_PUSH_ACTION,
    CHECKOUT_ACTION,
    CI_WORKFLOW_FILE,
    DEFAULT_BUILD_CONTEXT,
    DEFAULT_DOCKERFILE_PATH,
    DEFAULT_WORKFLOWS_DIR,
    DOCKERHUB_TOKEN_SECRET,
    DOCKERHUB_USERNAME_SECRET,
    LATEST_TAG_BRANCH,
    LOGIN_ACTION,
    REUSABLE_DEFAULT_IMAGE_TAG,
    REUSABLE_DEFAULT_PLATFORMS,
    REUSABLE_WORKFLOW_FILE,
    SETUP_BUILDX_ACTION,
    SETUP_QEMU_ACTION,
    TRIGGER_BRANCHES,
    TRIGGER_TAG_PATTERN,
)
from dockwright.exceptions import TemplateRenderError
from dockwright.logging import get_logger
from dockwright.setup.models import (
    DeploymentMode,
    RenderedDocument,
    RenderedWorkflows,
    WorkflowConfig,
)

__all__ = [
    "TAG_EXPRESSION",
    "render_workflows",
    "render_inline",
    "render_local_reusable",
    "render_remote_shared",
    "yaml_single_quote",
]

logger = get_logger(__name__)

#: Image tag: ``latest`` on main, otherwise the branch or tag name
TAG_EXPRESSION = (
    "${{ github.ref_name == '"
    + LATEST_TAG_BRANCH
    + "' && 'latest' || github.ref_name }}"
)

INLINE_TEMPLATE = "inline_ci.yml.j2"
REUSABLE_TEMPLATE = "reusable.yml.j2"
CALLER_TEMPLATE = "caller_ci.yml.j2"


def yaml_single_quote(value: Any) -> str:
    """Quote a value as a single-quoted YAML scalar.

    Examples:
        >>> yaml_single_quote("./Dockerfile")
        "'./Dockerfile'"
        >>> yaml_single_quote("it's")
        "'it''s'"
    """
    return "'" + str(value).replace("'", "''") + "'"


@lru_cache(maxsize=1)
def _environment() -> Environment:
    env = Environment(
        loader=PackageLoader("dockwright.setup", "templates"),
        autoescape=False,  # YAML output, not HTML
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=StrictUndefined,
        block_start_string="<%",
        block_end_string="%>",
        variable_start_string="<<",
        variable_end_string=">>",
        comment_start_string="<#",
        comment_end_string="#>",
    )
    env.filters["squote"] = yaml_single_quote
    return env


def _base_context(config: WorkflowConfig, image_name: str) -> dict[str, Any]:
    return {
        "trigger_branches": TRIGGER_BRANCHES,
        "trigger_tag_pattern": TRIGGER_TAG_PATTERN,
        "tag_expression": TAG_EXPRESSION,
        "username_secret": DOCKERHUB_USERNAME_SECRET,
        "token_secret": DOCKERHUB_TOKEN_SECRET,
        "actions": {
            "checkout": CHECKOUT_ACTION,
            "setup_qemu": SETUP_QEMU_ACTION,
            "setup_buildx": SETUP_BUILDX_ACTION,
            "login": LOGIN_ACTION,
            "build_push": BUILD_PUSH_ACTION,
        },
        "image_name": image_name,
        "dockerfile_path": config.dockerfile_path,
        "build_context": config.build_context,
        "platforms": config.platforms_csv,
    }


def _render(
    mode: DeploymentMode,
    template_name: str,
    context: dict[str, Any],
) -> str:
    """Render one template and check that the result parses as a workflow.

    Raises:
        TemplateRenderError: If the template is missing, fails to render or
            produces YAML that does not parse into a workflow mapping.
    """
    try:
        text = _environment().get_template(template_name).render(**context)
    except TemplateNotFound as e:
        raise TemplateRenderError(
            mode, f"Template file not found: {template_name}"
        ) from e
    except TemplateError as e:
        raise TemplateRenderError(mode, f"Template rendering failed: {e}") from e

    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise TemplateRenderError(
            mode, f"{template_name} produced invalid YAML: {e}"
        ) from e
    if not isinstance(document, dict) or "jobs" not in document:
        raise TemplateRenderError(
            mode, f"{template_name} did not produce a workflow with jobs"
        )
    return text


def _finish(
    config: WorkflowConfig,
    documents: tuple[RenderedDocument, ...],
    image_name: str,
) -> RenderedWorkflows:
    notices: list[str] = []
    if image_name != config.image_name:
        notices.append(
            f"Converted to lowercase: {image_name} (Docker requires lowercase)"
        )

    summary = [
        f"Repository: {config.repository.full_name or 'unknown'}",
        f"Deployment Type: {config.description}",
        f"Docker Image: {image_name}",
        f"Platforms: {config.platforms_csv}",
    ]
    if notices:
        summary.append(f"Image name converted to lowercase (from {config.image_name})")

    logger.debug(
        "workflows_rendered",
        mode=config.deployment_mode.value,
        files=[doc.file_name for doc in documents],
    )
    return RenderedWorkflows(
        mode=config.deployment_mode,
        documents=documents,
        description=config.description,
        image_name=image_name,
        summary_lines=tuple(summary),
        notices=tuple(notices),
    )


def render_inline(config: WorkflowConfig) -> RenderedWorkflows:
    """Render the single-file workflow with every build step inline."""
    image_name = config.image_name.lower()
    context = _base_context(config, image_name)
    ci = _render(DeploymentMode.INLINE, INLINE_TEMPLATE, context)
    return _finish(config, (RenderedDocument(CI_WORKFLOW_FILE, ci),), image_name)


def render_local_reusable(config: WorkflowConfig) -> RenderedWorkflows:
    """Render a reusable workflow plus a ``ci.yml`` that calls it locally."""
    mode = DeploymentMode.LOCAL_REUSABLE
    image_name = config.image_name.lower()
    context = _base_context(config, image_name)
    context["reusable_defaults"] = {
        "image_tag": REUSABLE_DEFAULT_IMAGE_TAG,
        "dockerfile_path": DEFAULT_DOCKERFILE_PATH,
        "build_context": DEFAULT_BUILD_CONTEXT,
        "platforms": REUSABLE_DEFAULT_PLATFORMS,
    }
    context["workflow_ref"] = f"./{DEFAULT_WORKFLOWS_DIR}/{REUSABLE_WORKFLOW_FILE}"

    reusable = _render(mode, REUSABLE_TEMPLATE, context)
    ci = _render(mode, CALLER_TEMPLATE, context)
    return _finish(
        config,
        (
            RenderedDocument(REUSABLE_WORKFLOW_FILE, reusable),
            RenderedDocument(CI_WORKFLOW_FILE, ci),
        ),
        image_name,
    )


def render_remote_shared(config: WorkflowConfig) -> RenderedWorkflows:
    """Render a ``ci.yml`` that calls a workflow in another repository."""
    image_name = config.image_name.lower()
    context = _base_context(config, image_name)
    context["workflow_ref"] = (
        f"{config.shared_workflow_repo}/{DEFAULT_WORKFLOWS_DIR}/"
        f"{REUSABLE_WORKFLOW_FILE}@{config.shared_workflow_ref}"
    )
    ci = _render(DeploymentMode.REMOTE_SHARED, CALLER_TEMPLATE, context)
    return _finish(config, (RenderedDocument(CI_WORKFLOW_FILE, ci),), image_name)


_RENDERERS = {
    DeploymentMode.INLINE: render_inline,
    DeploymentMode.LOCAL_REUSABLE: render_local_reusable,
    DeploymentMode.REMOTE_SHARED: render_remote_shared,
}


def render_workflows(config: WorkflowConfig) -> RenderedWorkflows:
    """Render the documents for the config's deployment mode."""
    return _RENDERERS[config.deployment_mode](config)
