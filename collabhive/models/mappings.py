"""
Fixed vocabularies shared with the frontend.

Each mapping is key -> display label. Insertion order is significant: the
first complexity key is the default for freshly created projects.
"""

PROJECT_COMPLEXITIES: dict[str, str] = {
    "beginner": "Beginner",
    "intermediate": "Intermediate",
    "advanced": "Advanced",
}

PROJECT_ROLES: dict[str, str] = {
    "frontend": "Frontend Developer",
    "backend": "Backend Developer",
    "fullstack": "Full-stack Developer",
    "mobile": "Mobile Developer",
    "devops": "DevOps Engineer",
    "data": "Data Scientist",
    "designer": "UI/UX Designer",
    "product": "Product Manager",
}

PROJECT_TECHNOLOGIES: dict[str, str] = {
    "javascript": "JavaScript",
    "typescript": "TypeScript",
    "python": "Python",
    "java": "Java",
    "go": "Go",
    "rust": "Rust",
    "react": "React",
    "vue": "Vue",
    "angular": "Angular",
    "nodejs": "Node.js",
    "django": "Django",
    "fastapi": "FastAPI",
    "postgresql": "PostgreSQL",
    "mongodb": "MongoDB",
    "redis": "Redis",
    "docker": "Docker",
    "kubernetes": "Kubernetes",
    "aws": "AWS",
}

# search sort key -> sort label understood by the catalog
PROJECT_SEARCH_SORT_BY: dict[str, str] = {
    "newest": "Newest",
    "oldest": "Oldest",
    "most-favorites": "Most favorites",
}


def get_mapping_keys(mapping: dict[str, str]) -> list[str]:
    return list(mapping.keys())


def default_complexity() -> str:
    return get_mapping_keys(PROJECT_COMPLEXITIES)[0]
