"""Imports published templates from the template store as markdown files."""

from pathlib import Path
from typing import Any

import structlog

from email_vcs.mandrill.abc import TemplateStoreBase
from email_vcs.schemas.template import TemplateRecord
from email_vcs.templates import render_markdown

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def template_summary_to_record(summary: dict[str, Any]) -> TemplateRecord:
    """Convert the published fields of a template summary into a template record.

    Templates without labels are labelled with each part of their slug.
    """
    labels = list(summary.get("labels") or []) or summary["slug"].split("-")
    return TemplateRecord(
        subject=summary.get("publish_subject") or "",
        html=summary.get("publish_code") or "",
        text=summary.get("publish_text") or "",
        labels=labels,
        from_email=summary.get("publish_from_email") or "",
        from_name=summary.get("publish_from_name") or "",
    )


async def import_templates(store: TemplateStoreBase, output_dir: Path) -> list[Path]:
    """Write every published template in the store to ``<output_dir>/<slug>.md``.

    Returns:
        list[Path]: The files that were written.
    """
    summaries = await store.list_templates()
    if not summaries:
        logger.warning("No templates found in template store")
        return []

    output_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for summary in summaries:
        if not summary.get("publish_subject"):
            logger.info("Skipping unpublished template", slug=summary.get("slug"))
            continue
        path = output_dir / f"{summary['slug']}.md"
        logger.info("Writing markdown template", path=str(path))
        path.write_text(render_markdown(template_summary_to_record(summary)), encoding="utf-8")
        written.append(path)
    return written
