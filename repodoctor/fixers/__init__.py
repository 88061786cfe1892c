from repodoctor.fixers.base import Fixer
from repodoctor.fixers.directory import DirectoryFixer
from repodoctor.fixers.editorconfig import EditorConfigFixer
from repodoctor.fixers.gitignore import GitignoreFixer
from repodoctor.fixers.registry import FixerRegistry, default_registry

__all__ = [
    "Fixer",
    "DirectoryFixer",
    "GitignoreFixer",
    "EditorConfigFixer",
    "FixerRegistry",
    "default_registry",
]
