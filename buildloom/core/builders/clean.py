"""Clean — remove working, distribution and temporary files."""

from __future__ import annotations

from buildloom.core.builders.base import TaskBuilder, ensure_project, filesystem_action
from buildloom.core.models.project import Project
from buildloom.core.models.schema import Language, ProjectType
from buildloom.core.models.task import ActionTask, Task

_BASE_DIRS = ("coverage", "dist", "working")


class CleanTaskBuilder(TaskBuilder):
    def __init__(self):
        super().__init__(
            "clean",
            "Cleans out working, distribution and temporary files and directories",
        )

    def _create_task(self, project: Project) -> Task:
        project = ensure_project(project)
        root = project.root_dir

        dirs = list(_BASE_DIRS)
        extras: list[str] = []

        if project.language == Language.TS:
            dirs.append(".tscache")
            extras.append(root.get_file_glob("tscommand-*.tmp.txt"))
        if project.type == ProjectType.AWS_MICROSERVICE:
            dirs.append("cdk.out")
        if project.type == ProjectType.API:
            extras.append(root.get_child("logs").get_all_files_glob("log"))

        patterns = [root.get_child(d).glob_path for d in dirs] + extras
        return ActionTask(
            action=filesystem_action(self._action_id("delete"), "delete", patterns=patterns)
        )
