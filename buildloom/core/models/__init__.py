"""
Domain models — directory tree, project, task graph and execution contract.

All models are re-exported here for convenient access:

    from buildloom.core.models import Project, Directory, Action, Receipt
"""

from buildloom.core.models.action import Action, Receipt
from buildloom.core.models.directory import Directory
from buildloom.core.models.project import DEFAULT_TARGET, Project
from buildloom.core.models.schema import (
    AwsConfig,
    BuildMetadata,
    BuildSecret,
    ContainerTarget,
    Language,
    ProjectDescriptor,
    ProjectType,
)
from buildloom.core.models.task import (
    ActionTask,
    NoticeTask,
    ParallelTask,
    SeriesTask,
    Task,
    WatchTask,
)

__all__ = [
    "DEFAULT_TARGET",
    # action.py
    "Action",
    "ActionTask",
    "AwsConfig",
    "BuildMetadata",
    "BuildSecret",
    "ContainerTarget",
    # directory.py
    "Directory",
    "Language",
    "NoticeTask",
    "ParallelTask",
    # project.py
    "Project",
    "ProjectDescriptor",
    "ProjectType",
    "Receipt",
    "SeriesTask",
    # task.py
    "Task",
    "WatchTask",
]
