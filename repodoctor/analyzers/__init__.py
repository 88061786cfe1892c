from repodoctor.analyzers.base import Analyzer
from repodoctor.analyzers.config_files import ConfigAnalyzer
from repodoctor.analyzers.dependencies import DependenciesAnalyzer
from repodoctor.analyzers.documentation import DocumentationAnalyzer
from repodoctor.analyzers.security import SecurityAnalyzer
from repodoctor.analyzers.structure import StructureAnalyzer
from repodoctor.analyzers.testing import TestingAnalyzer


def default_analyzers() -> list[Analyzer]:
    return [
        StructureAnalyzer(),
        DependenciesAnalyzer(),
        ConfigAnalyzer(),
        SecurityAnalyzer(),
        TestingAnalyzer(),
        DocumentationAnalyzer(),
    ]


__all__ = [
    "Analyzer",
    "StructureAnalyzer",
    "DependenciesAnalyzer",
    "ConfigAnalyzer",
    "SecurityAnalyzer",
    "TestingAnalyzer",
    "DocumentationAnalyzer",
    "default_analyzers",
]
