"""Property map used for template interpolation.

Flat camelCase keys (projectName, projectVersion, tagName, ...) plus
nested groups (project.*, release.*) so templates can use either
{{projectVersion}} or {{project.version}}.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from kerygma_release.model import Model, Project


def project_props(project: Project) -> dict[str, Any]:
    authors = list(project.authors)
    props: dict[str, Any] = {
        "projectName": project.name,
        "projectNameCapitalized": project.name_capitalized,
        "projectVersion": project.version,
        "projectDescription": project.description,
        "projectWebsite": project.website,
        "projectSnapshot": project.is_snapshot,
        "projectAuthorsBySpace": " ".join(authors),
        "projectAuthorsByComma": ",".join(authors),
    }
    props["project"] = {
        "name": project.name,
        "nameCapitalized": project.name_capitalized,
        "version": project.version,
        "description": project.description,
        "website": project.website,
        "snapshot": project.is_snapshot,
        "authors": authors,
    }
    return props


def model_props(model: Model) -> dict[str, Any]:
    props = project_props(model.project)
    model.release.fill_props(props)
    props["distributionNames"] = ",".join(model.distributions)
    return props
