import os
import sys

import pytest

# Make the repository root importable so the tests run from a plain checkout.
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from resume_terminal.commands import build_registry  # noqa: E402
from resume_terminal.models import ResumeDocument  # noqa: E402
from resume_terminal.vfs import build_vfs  # noqa: E402


RESUME = {
    "personalInfo": {
        "name": "Ada Lovelace",
        "title": "Analyst",
        "contact": {
            "email": "ada@example.com",
            "github": "https://github.com/ada",
        },
    },
    "about": "I write programs for the Analytical Engine.",
    "experience": [
        {
            "company": "Analytical Engine Co",
            "position": "Programmer",
            "location": "London",
            "startDate": "1842",
            "endDate": "1843",
            "responsibilities": ["Wrote the first program", "Translated Menabrea"],
        },
        {
            "company": "Analytical Engine Co",
            "position": "Consultant",
            "location": "London",
            "startDate": "1844",
            "endDate": "1852",
            "responsibilities": ["Advised on Python bindings"],
        },
    ],
    "skills": {"technical": ["Mathematics", "Python"], "soft": ["Writing"]},
    "projects": [
        {"name": "Note G", "description": "Bernoulli numbers algorithm"},
    ],
    "education": {
        "university": "Home schooled",
        "certifications": ["Mathematics tutoring", "Music"],
    },
}


class FakeClipboard:
    """Records what would have been copied; can be told to fail."""

    def __init__(self):
        self.copied = []
        self.error = None

    def __call__(self, text):
        if self.error is not None:
            raise self.error
        self.copied.append(text)


@pytest.fixture
def resume_data():
    return RESUME


@pytest.fixture
def document():
    return ResumeDocument.model_validate(RESUME)


@pytest.fixture
def vfs(document):
    return build_vfs(document)


@pytest.fixture
def clipboard():
    return FakeClipboard()


@pytest.fixture
def registry(clipboard):
    return build_registry(clipboard=clipboard)
