from __future__ import annotations

from typing import Optional
from urllib.parse import urlparse


# Lower-cased alias -> canonical display name. Keys are compared after strip().lower().
LANGUAGE_ALIASES = {
    "js": "JavaScript",
    "javascript": "JavaScript",
    "node": "JavaScript",
    "nodejs": "JavaScript",
    "node.js": "JavaScript",
    "jsx": "JavaScript",
    "ts": "TypeScript",
    "typescript": "TypeScript",
    "tsx": "TypeScript",
    "py": "Python",
    "python": "Python",
    "python3": "Python",
    "rb": "Ruby",
    "ruby": "Ruby",
    "go": "Go",
    "golang": "Go",
    "rs": "Rust",
    "rust": "Rust",
    "java": "Java",
    "kt": "Kotlin",
    "kotlin": "Kotlin",
    "swift": "Swift",
    "c": "C",
    "cpp": "C++",
    "c++": "C++",
    "cs": "C#",
    "csharp": "C#",
    "c#": "C#",
    "php": "PHP",
    "sh": "Shell",
    "bash": "Shell",
    "shell": "Shell",
    "zsh": "Shell",
    "sql": "SQL",
    "html": "HTML",
    "css": "CSS",
    "scss": "SCSS",
    "dart": "Dart",
    "scala": "Scala",
    "elixir": "Elixir",
    "ex": "Elixir",
    "r": "R",
    "lua": "Lua",
    "yaml": "YAML",
    "yml": "YAML",
    "json": "JSON",
    "md": "Markdown",
    "markdown": "Markdown",
}


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def normalize_language(value: Optional[str]) -> Optional[str]:
    """Map a free-text language name to its canonical form.

    Lookup is case-insensitive. Unknown values come back trimmed but otherwise
    untouched, blank values become None.
    """
    cleaned = _clean(value)
    if cleaned is None:
        return None
    return LANGUAGE_ALIASES.get(cleaned.lower(), cleaned)


def normalize_repo_url(value: Optional[str]) -> Optional[str]:
    """Canonical repository URL.

    - lower-cased
    - forces https
    - strips trailing '/'
    - strips a trailing '.git'

    Example: "HTTP://Github.com/Foo/Bar.git/" -> "https://github.com/foo/bar"
    """
    cleaned = _clean(value)
    if cleaned is None:
        return None

    s = cleaned.lower()
    if "://" in s:
        s = s.split("://", 1)[1]

    s = s.rstrip("/")
    if s.endswith(".git"):
        s = s[:-4]
    s = s.rstrip("/")

    return f"https://{s}"


def is_valid_url(value: str) -> bool:
    u = urlparse(value.strip())
    return bool(u.scheme) and bool(u.netloc) and u.scheme.lower() in ("http", "https")
