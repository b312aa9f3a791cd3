"""
Task builders — one class per build step.

    from buildloom.core.builders import CleanTaskBuilder, BuildTaskBuilder
"""

from buildloom.core.builders.base import (
    CompositeTaskBuilder,
    ShellTaskBuilder,
    TaskBuilder,
)
from buildloom.core.builders.build import (
    BuildJsTaskBuilder,
    BuildTaskBuilder,
    BuildTsTaskBuilder,
    BuildUiTaskBuilder,
    CopyFilesTaskBuilder,
)
from buildloom.core.builders.clean import CleanTaskBuilder
from buildloom.core.builders.docs import (
    DocsJsTaskBuilder,
    DocsTaskBuilder,
    DocsTsTaskBuilder,
)
from buildloom.core.builders.not_supported import NotSupportedTaskBuilder
from buildloom.core.builders.package import (
    PackageAwsTaskBuilder,
    PackageContainerTaskBuilder,
    PackageNpmTaskBuilder,
    PackageTaskBuilder,
)
from buildloom.core.builders.publish import (
    PublishAwsTaskBuilder,
    PublishContainerTaskBuilder,
    PublishNpmTaskBuilder,
    PublishTaskBuilder,
)
from buildloom.core.builders.quality import (
    FormatTaskBuilder,
    LintFixTaskBuilder,
    LintTaskBuilder,
)
from buildloom.core.builders.test import TestTaskBuilder, TestUiTaskBuilder
from buildloom.core.builders.watch import WatchTaskBuilder

__all__ = [
    "BuildJsTaskBuilder",
    "BuildTaskBuilder",
    "BuildTsTaskBuilder",
    "BuildUiTaskBuilder",
    "CleanTaskBuilder",
    "CompositeTaskBuilder",
    "CopyFilesTaskBuilder",
    "DocsJsTaskBuilder",
    "DocsTaskBuilder",
    "DocsTsTaskBuilder",
    "FormatTaskBuilder",
    "LintFixTaskBuilder",
    "LintTaskBuilder",
    "NotSupportedTaskBuilder",
    "PackageAwsTaskBuilder",
    "PackageContainerTaskBuilder",
    "PackageNpmTaskBuilder",
    "PackageTaskBuilder",
    "PublishAwsTaskBuilder",
    "PublishContainerTaskBuilder",
    "PublishNpmTaskBuilder",
    "PublishTaskBuilder",
    "ShellTaskBuilder",
    "TaskBuilder",
    "TestTaskBuilder",
    "TestUiTaskBuilder",
    "WatchTaskBuilder",
]
