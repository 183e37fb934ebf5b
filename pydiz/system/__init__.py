"""Project assembly helpers."""

from .project import Project, ProjectConfig, create_project, create_project_from_image

__all__ = ["Project", "ProjectConfig", "create_project", "create_project_from_image"]
